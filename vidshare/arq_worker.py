from arq.connections import RedisSettings as ArqRedisSettings

from vidshare.core.config import GigaChatSettings, MuxSettings, RedisSettings
from vidshare.db.database import get_async_sessionmaker
from vidshare.core.logging import setup_logging
from vidshare.ml.llm import LLMService
from vidshare.services.mux_client import MuxClient
from vidshare.tasks.generation_task import generate_description_task, generate_title_task

app_redis_config = RedisSettings()


async def startup(ctx):
    setup_logging()
    ctx["llm"] = LLMService(GigaChatSettings())
    ctx["mux"] = MuxClient(MuxSettings())
    ctx["sessionmaker"] = get_async_sessionmaker()


async def shutdown(ctx):
    await ctx["mux"].close()


class WorkerSettings:
    functions = [generate_title_task, generate_description_task]
    on_startup = startup
    on_shutdown = shutdown
    job_timeout = app_redis_config.job_timeout

    redis_settings = ArqRedisSettings(
        host=app_redis_config.redis_host,
        port=app_redis_config.redis_port,
        password=app_redis_config.redis_password,
    )
