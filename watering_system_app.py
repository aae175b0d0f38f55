"""Command-line entry point for the watering system controller.

Detects the platform, opens the hardware, starts the three control loops
and serves the HTTP control surface until SIGINT/SIGTERM. The hardware is
held in a ``with`` block so it is released on every exit path.
"""
from __future__ import annotations

import logging

from app import create_app
from app.config import load_config, setup_logging
from app.domain.exceptions import UnsupportedEnvironmentError, WateringSystemError
from app.hardware.bundle import HardwareBundle
from app.hardware.platform import EXIT_UNSUPPORTED_PLATFORM
from app.services.container import WateringContext

logger = logging.getLogger("watering_system")


def main() -> int:
    try:
        config = load_config()
    except (ValueError, RuntimeError) as exc:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
        logger.error("ERROR: Invalid configuration: %s", exc)
        return 2

    setup_logging(debug=config.DEBUG, log_path=config.log_path)

    try:
        hardware = HardwareBundle.open(config)
    except UnsupportedEnvironmentError as exc:
        logger.error("ERROR: %s", exc)
        return EXIT_UNSUPPORTED_PLATFORM
    except WateringSystemError as exc:
        logger.error("ERROR: Failed to open hardware: %s", exc)
        return 1

    context: WateringContext | None = None
    with hardware:
        try:
            context = WateringContext.build(config, hardware)
            context.start()
            app = create_app(context=context, install_signal_handlers=True)
            logger.info("Starting server on %s:%s", config.host, config.port)
            app.run(host=config.host, port=config.port, threaded=True, use_reloader=False)
            logger.info("Server stopped.")
            return 0
        except KeyboardInterrupt:
            logger.info("Server stopped by user.")
            return 0
        except WateringSystemError as exc:
            logger.error("ERROR: %s", exc)
            return 1
        finally:
            if context is not None:
                context.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
