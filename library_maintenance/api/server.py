import argparse
import logging

from library_maintenance import config


def main():
    parser = argparse.ArgumentParser(description='Library Maintenance API Server')
    parser.add_argument('--host', default=config.DEFAULT_HOST, help='Host to bind to')
    parser.add_argument('--port', type=int, default=config.DEFAULT_PORT, help='Port to bind to')
    parser.add_argument('--reload', action='store_true', help='Enable auto-reload')
    parser.add_argument('--log-level', default='info', help='Log level for the service and uvicorn')
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    import uvicorn

    uvicorn.run(
        "library_maintenance.api.app:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=args.reload,
    )

if __name__ == "__main__":
    main()
