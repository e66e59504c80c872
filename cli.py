import argparse
import dataclasses
import json

from app import App, build_app
from config.settings import get_settings
from models.preferences import GUESS_AGE_KEY, GUESS_NATIONALITY_KEY
from services.reporting import format_outcome
from utils.logging_setup import init_logging


PREFERENCE_FLAGS = {
    "age": GUESS_AGE_KEY,
    "nationality": GUESS_NATIONALITY_KEY,
}


def _build(args) -> App:
    settings = get_settings()
    if args.db and args.db != settings.db_path:
        settings = dataclasses.replace(settings, db_path=args.db)
    return build_app(settings)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_bootstrap(args):
    app = _build(args)
    app.startup()
    print("Preferences ready")


def cmd_lookup(args):
    app = _build(args)
    app.startup()
    outcome = app.controller.submit(args.name)
    _print_json(format_outcome(outcome))
    if not outcome.ok:
        raise SystemExit(1)


def cmd_settings_show(args):
    app = _build(args)
    app.startup()
    _print_json(app.mirror.current_snapshot())


def cmd_settings_set(args):
    app = _build(args)
    app.startup()
    key = PREFERENCE_FLAGS[args.flag]
    changed = app.store.set(key, args.value == "on")
    if not changed:
        print(f"{key} already {args.value}")
    _print_json(app.mirror.current_snapshot())


def cmd_sync_push(args):
    app = _build(args)
    app.startup()
    app.mirror.push_now()
    print("Settings pushed")


def cmd_sync_pull(args):
    app = _build(args)
    delivered = app.startup()
    print(f"Handled {delivered} peer deliveries")
    _print_json(app.mirror.current_snapshot())


def cmd_sync_request(args):
    app = _build(args)
    app.startup()
    # A watch already asked during startup
    if app.settings.device_role != "watch":
        app.mirror.request_from_peer()
    print("Settings requested from peer")


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="Name insight CLI (genderize / agify / nationalize)")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite preferences DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create tables and register default preferences")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_look = sub.add_parser("lookup", help="Guess gender (plus age/nationality when enabled) for a name")
    p_look.add_argument("name", help="First name to look up")
    p_look.set_defaults(func=cmd_lookup)

    p_set = sub.add_parser("settings", help="Show or change mirrored preferences")
    set_sub = p_set.add_subparsers(dest="settings_cmd", required=True)
    p_show = set_sub.add_parser("show", help="Print current preference values")
    p_show.set_defaults(func=cmd_settings_show)
    p_change = set_sub.add_parser("set", help="Enable or disable an optional guess")
    p_change.add_argument("flag", choices=sorted(PREFERENCE_FLAGS), help="Preference to change")
    p_change.add_argument("value", choices=["on", "off"])
    p_change.set_defaults(func=cmd_settings_set)

    p_sync = sub.add_parser("sync", help="Exchange preferences with the paired peer")
    sync_sub = p_sync.add_subparsers(dest="sync_cmd", required=True)
    p_push = sync_sub.add_parser("push", help="Send current preferences to the peer")
    p_push.set_defaults(func=cmd_sync_push)
    p_pull = sync_sub.add_parser("pull", help="Apply deliveries waiting from the peer")
    p_pull.set_defaults(func=cmd_sync_pull)
    p_req = sync_sub.add_parser("request", help="Ask the peer to send its preferences")
    p_req.set_defaults(func=cmd_sync_request)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
