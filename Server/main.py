"""
Boluxiones Game Server - Main Entry Point

This is the main entry point for the daily puzzle server.
It initializes all services and starts the Flask-SocketIO application.
"""

import os
import time
from boluxiones import create_app
from boluxiones.config import config, validate_settings
from boluxiones.services.catalog_service import CatalogService
from boluxiones.services.game_service import initialize_game_service, get_game_service
from boluxiones.services.storage_service import SessionGateway, create_session_store
from boluxiones.utils.game_logger import game_logger


def timer_worker(socketio, tick_seconds):
    """
    Background worker that applies due timer events (tile reveals,
    selection clearing, auto-solve steps) and rolls the session over
    when the day changes.
    """
    print("Timer worker started")
    while True:
        try:
            game_service = get_game_service()
            if game_service:
                game_service.run_due_events()
        except Exception as e:
            game_logger.logger.error(f"Error in timer worker: {e}")

        socketio.sleep(tick_seconds)


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")
        validate_settings()
        app_config = config[os.getenv("APP_ENV", "default")]

        # Initialize session storage
        store = create_session_store(app_config.MONGO_URI, app_config.MONGO_DB)
        gateway = SessionGateway(store)
        print(f"✓ Session storage ready ({type(store).__name__})")

        # Initialize game service
        catalog_service = CatalogService(app_config.GROUPINGS_URL, app_config.GROUPINGS_TIMEOUT_SECONDS)
        game_service = initialize_game_service(
            catalog_service, gateway, shuffle_initial=app_config.SHUFFLE_INITIAL
        )
        print("✓ Game service initialized successfully")

        # Create Flask app
        print("Creating Flask application...")
        app, socketio = create_app(app_config, game_service)
        print("✓ Flask application created successfully")

        # Load today's session (restores a save or waits for the groupings)
        started = time.monotonic()
        board = game_service.get_board()
        print(f"✓ Session {board.date_key} ready, groupings {board.catalog_status} "
              f"({time.monotonic() - started:.2f}s)")

        socketio.start_background_task(timer_worker, socketio, app_config.TIMER_TICK_SECONDS)
        print(f"✓ Timer worker started - ticking every {app_config.TIMER_TICK_SECONDS}s")

        game_logger.logger.info("Boluxiones Server Starting")

        print(f"\nStarting Boluxiones Server on {app_config.HOST}:{app_config.PORT}")
        print(f"Debug mode: {app_config.DEBUG}")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=app_config.HOST, port=app_config.PORT, debug=app_config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Boluxiones Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
