from loguru import logger

from vidshare.core.config import AppSettings

_sink_id = None


def setup_logging(settings: AppSettings = None) -> None:
    global _sink_id
    settings = settings or AppSettings()
    if _sink_id is not None:
        logger.remove(_sink_id)
    _sink_id = logger.add(
        settings.log_file,
        level=settings.app_log_level.value.upper(),
        rotation=settings.log_rotation,
        compression=settings.log_compression.value,
        format=settings.log_format,
    )
