import argparse
import logging
import signal
import sys
from typing import Optional

from app_config import AppConfig, AppConfigurationError, load_app_config
from app_config_parser import log_level_number, parse_log_level
from contracts.command_contract import CLI_COMMAND_TO_RUNTIME_COMMAND
from history import SessionStore
from pomodoro import PomodoroCycleController
from runtime import (
    RuntimeBootstrap,
    RuntimeEngine,
    RuntimeHooks,
    SettingsState,
    ShutdownRequestedEvent,
)
from runtime.contracts import NotificationSinkLike
from runtime.events import EventPublisher
from server import (
    CommandForwardError,
    ServerConfigurationError,
    UIServer,
    UIServerConfig,
    forward_command,
)
from user_settings import SettingsError, load_settings


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("yapa")


def setup_signal_handlers(publisher: EventPublisher) -> None:
    """Turn SIGTERM and SIGINT into a shutdown event for the runtime loop."""

    def signal_handler(signum: int, frame) -> None:
        signal_name = signal.Signals(signum).name
        publisher.publish(ShutdownRequestedEvent(reason=f"{signal_name} received"))

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yapa",
        description="Yet another pomodoro app: a small always-on-top timer widget.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.toml (default: $YAPA_CONFIG_FILE or ./config.toml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override [app] log_level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=sorted(CLI_COMMAND_TO_RUNTIME_COMMAND),
        help="Send a command to the running widget instead of starting one",
    )
    return parser


def build_notifier(
    app_config: AppConfig,
    settings: SettingsState,
    logger: logging.Logger,
) -> Optional[NotificationSinkLike]:
    """Create the sound notifier; the widget keeps running silently when audio is unavailable."""
    if not app_config.sound.enabled:
        logger.info("Sound disabled in config")
        return None

    try:
        # PortAudio is loaded when sounddevice is imported.
        from sound import (
            NotificationService,
            SoundConfig,
            SoundConfigurationError,
            SoundDeviceAudioOutput,
            SoundError,
            load_clips,
        )
    except OSError as error:
        logger.warning("Sound output unavailable: %s", error)
        return None

    try:
        sound_config = SoundConfig.from_settings(app_config.sound)
        clips = load_clips(sound_config)
        output = SoundDeviceAudioOutput(
            output_device_index=sound_config.output_device_index,
            logger=logging.getLogger("sound.output"),
        )
    except (SoundConfigurationError, SoundError) as error:
        logger.warning("Continuing without sound: %s", error)
        return None

    logger.info("Sound enabled")
    return NotificationService(
        clips=clips,
        output=output,
        is_enabled=settings.sound_enabled,
        logger=logging.getLogger("sound"),
    )


def build_ui_server(app_config: AppConfig, logger: logging.Logger) -> Optional[UIServer]:
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error(f"UI server configuration error: {error}")
        logger.warning("Continuing without UI server.")
        return None

    if not ui_server_config.enabled:
        logger.info("UI server disabled in config")
        return None

    try:
        ui_server = UIServer(
            config=ui_server_config,
            logger=logging.getLogger("ui_server"),
        )
        logger.info("Starting UI server...")
        ui_server.start(timeout_seconds=5.0)
    except (OSError, RuntimeError) as error:
        logger.error(f"UI server startup failed: {error}")
        logger.warning("Continuing without UI server.")
        return None

    logger.info("Widget ready at http://%s:%d", ui_server.host, ui_server.port)
    return ui_server


def send_command(app_config: AppConfig, command: str, logger: logging.Logger) -> int:
    """Forward a CLI command to the widget that is already running."""
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error(f"UI server configuration error: {error}")
        return 1

    if not ui_server_config.enabled:
        logger.error("Cannot send '%s': the UI server is disabled in config", command)
        return 1

    try:
        forward_command(
            ui_server_config.websocket_url,
            CLI_COMMAND_TO_RUNTIME_COMMAND[command],
            logger=logging.getLogger("ui_client"),
        )
    except CommandForwardError as error:
        logger.error(f"Command '{command}' not delivered: {error}")
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Run the widget, or forward one command to a running instance."""
    args = build_arg_parser().parse_args(argv)
    logger = setup_logging(level=logging.INFO)

    try:
        app_config = load_app_config(args.config)
        log_level = parse_log_level(args.log_level or app_config.app.log_level, "--log-level")
    except AppConfigurationError as error:
        logger.error(f"App configuration error: {error}")
        return 1

    logging.getLogger().setLevel(log_level_number(log_level))
    logger.info("Loaded runtime config: %s", app_config.source_file or "<defaults>")

    if args.command:
        return send_command(app_config, args.command, logger)

    try:
        settings = SettingsState(
            load_settings(app_config.storage.settings_file),
            app_config.storage.settings_file,
            logger=logging.getLogger("settings"),
        )
        controller = PomodoroCycleController(
            settings.current.cycle_config(),
            logger=logging.getLogger("pomodoro"),
        )
    except SettingsError as error:
        logger.error(f"Settings error: {error}")
        return 1

    session_store = SessionStore(
        app_config.storage.history_file,
        logger=logging.getLogger("history"),
    )
    notifier = build_notifier(app_config, settings, logger)
    ui_server = build_ui_server(app_config, logger)

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logging.getLogger("runtime"),
            app_config=app_config,
            controller=controller,
            settings=settings,
            session_store=session_store,
            notifier=notifier,
            ui_server=ui_server,
            hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
        )
    )
    return engine.run()


if __name__ == "__main__":
    sys.exit(main())
