import logging
import os
import sys

import uvicorn

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

logger = logging.getLogger(__name__)


def main() -> None:
    from clinicvoice.core.config import get_settings

    settings = get_settings()
    port = int(os.environ.get('PORT', settings.port))
    logger.info(f"Starting {settings.app_name} v{settings.app_version} on {settings.host}:{port} ({settings.app_env})")
    uvicorn.run(
        "clinicvoice.app:app",
        host=settings.host,
        port=port,
        reload=settings.is_development and settings.debug,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
