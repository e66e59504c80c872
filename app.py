"""
Application assembly: wires settings, preference store, peer channel, mirror and lookup.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from config.settings import Settings, get_settings
from db.connection import get_connection
from ports.http import HttpSessionPort
from ports.peer import PeerChannelPort
from services.lookup_service import LookupController, NameLookupService
from services.name_api_client import NameApiClient
from services.preference_store import PreferenceStore
from sync.channels import NullPeerChannel
from sync.mailbox_channel import MailboxPeerChannel
from sync.settings_mirror import SettingsMirror


logger = logging.getLogger(__name__)


@dataclass
class App:
    settings: Settings
    store: PreferenceStore
    channel: PeerChannelPort
    mirror: SettingsMirror
    client: NameApiClient
    service: NameLookupService
    controller: LookupController

    def startup(self) -> int:
        """Launch sequence: defaults, channel activation, pending peer deliveries, auto-push.

        A watch additionally asks its phone for settings. Returns the number of
        peer deliveries handled while starting.
        """
        self.mirror.register_defaults()
        self.mirror.activate()
        delivered = self.pull()
        self.mirror.attach_auto_push()
        if self.settings.device_role == "watch":
            self.mirror.request_from_peer()
        logger.debug("App started", extra={"step": "startup", "status": self.settings.device_role})
        return delivered

    def pull(self) -> int:
        if isinstance(self.channel, MailboxPeerChannel):
            return self.channel.poll()
        return 0


def build_channel(settings: Settings) -> PeerChannelPort:
    if settings.peer_channel == "mailbox":
        conn = get_connection(settings.mailbox_path)
        return MailboxPeerChannel(conn, settings.device_id, settings.peer_id)
    return NullPeerChannel()


def build_app(
    settings: Optional[Settings] = None,
    session: Optional[HttpSessionPort] = None,
    channel: Optional[PeerChannelPort] = None,
) -> App:
    settings = settings or get_settings()
    store = PreferenceStore(get_connection(settings.db_path))
    channel = channel if channel is not None else build_channel(settings)
    mirror = SettingsMirror(store, channel)
    client = NameApiClient(settings=settings, session=session)
    service = NameLookupService(client)
    controller = LookupController(service, store.preferences)
    # Local preference changes re-run the displayed lookup with the new enrichments
    store.subscribe(controller.on_preferences_changed)
    return App(
        settings=settings,
        store=store,
        channel=channel,
        mirror=mirror,
        client=client,
        service=service,
        controller=controller,
    )
