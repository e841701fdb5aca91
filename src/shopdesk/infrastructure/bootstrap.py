"""Builds an operator session from settings.

The CLI gets its HTTP source, alert devices and loop from here; nothing
else imports the concrete implementations.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopdesk.application.order_board import OrderBoard
from shopdesk.application.order_workflow import OrderWorkflowManager
from shopdesk.application.sync_loop import SyncLoop
from shopdesk.domain.port.alert_devices import Modality
from shopdesk.domain.service.alert_controller import AlertController
from shopdesk.infrastructure.alerting.terminal_devices import (
    ConfiguredPermissions,
    LoggingVibrator,
    TerminalBellPlayer,
)
from shopdesk.infrastructure.config import Settings
from shopdesk.infrastructure.http.shop_api_client import ShopApiClient


def order_source(settings: Settings) -> ShopApiClient:
    return ShopApiClient(
        base_url=settings.base_url,
        session_cookie=settings.session_cookie,
        timeout=settings.request_timeout,
    )


def alert_controller(settings: Settings) -> AlertController:
    granted = set()
    if settings.alert_sound:
        granted.add(Modality.SOUND)
    if settings.alert_vibration:
        granted.add(Modality.VIBRATION)
    return AlertController(
        sound=TerminalBellPlayer(),
        vibrator=LoggingVibrator(),
        permissions=ConfiguredPermissions(granted),
    )


@dataclass
class Desk:
    """Everything one operator session needs, sharing a single board."""

    source: ShopApiClient
    alerts: AlertController
    board: OrderBoard
    sync: SyncLoop
    workflow: OrderWorkflowManager


def desk(settings: Settings) -> Desk:
    source = order_source(settings)
    alerts = alert_controller(settings)
    board = OrderBoard()
    return Desk(
        source=source,
        alerts=alerts,
        board=board,
        sync=SyncLoop(source, alerts, board, interval=settings.poll_interval),
        workflow=OrderWorkflowManager(source, board, alerts),
    )
