import os
import sys
import argparse
import logging
from pathlib import Path
from dotenv import load_dotenv
import uvicorn

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Load .env before the package reads its settings
load_dotenv()


def _get_default_workers() -> int:
    """Read the default worker count from UVICORN_WORKERS."""
    value = os.getenv("UVICORN_WORKERS", "1")
    try:
        workers = int(value)
        return max(workers, 1)
    except ValueError:
        print(f"UVICORN_WORKERS value '{value}' is not an integer, using 1.")
        return 1


def main():
    """Run the dashboard API server."""
    parser = argparse.ArgumentParser(
        description="Kepler Power Dashboard API Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default (127.0.0.1:8000, auto reload)
  python run.py

  # Listen on all interfaces
  python run.py --host 0.0.0.0 --port 8080

  # Production
  python run.py --workers 4 --no-reload

URLs:
  - API docs: http://localhost:8000/docs
  - Health:   http://localhost:8000/api/v1/system/health
  - Stream:   ws://localhost:8000/api/v1/stream
        """
    )

    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind (default: 8000)")
    parser.add_argument(
        "--reload",
        action="store_true",
        default=True,
        help="Restart on code changes (development, default: True)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_false",
        dest="reload",
        help="Disable auto reload (production)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=_get_default_workers(),
        help="Number of uvicorn worker processes (default: UVICORN_WORKERS or 1)"
    )

    args = parser.parse_args()

    if args.workers < 1:
        print(f"Invalid worker count {args.workers}, using 1.")
        args.workers = 1

    if args.reload and args.workers > 1:
        print("Reload mode does not support multiple workers, disabling reload.")
        args.reload = False

    from kepler_dashboard.config import settings
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger = logging.getLogger("kepler_dashboard")
    logger.info(f"Prometheus URL: {settings.PROMETHEUS_URL} (job: {settings.KEPLER_JOB})")
    logger.info(f"Server: http://{args.host}:{args.port} (workers: {args.workers})")

    try:
        uvicorn.run(
            "kepler_dashboard.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=args.workers,
            log_level=settings.LOG_LEVEL.lower()
        )
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception as e:
        logger.error(f"Server failed to start: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
