"""会话身份存储 -- worker_auth / admin_auth 键

身份由外部认证协作方提供，这里只负责读写，不做任何校验。
"""

from ..config import LS_ADMIN_AUTH, LS_WORKER_AUTH
from ..models.session import AdminAuth, WorkerAuth
from .codec import dump_model, load_model
from .protocols import KeyValueStore


class SessionStore:
    """当前操作者身份的读写"""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def get_worker_auth(self) -> WorkerAuth | None:
        return load_model(await self._kv.get(LS_WORKER_AUTH), WorkerAuth, LS_WORKER_AUTH)

    async def set_worker_auth(self, auth: WorkerAuth | None) -> None:
        """写入 worker 身份，None 表示登出"""
        if auth is None:
            await self._kv.remove(LS_WORKER_AUTH)
        else:
            await self._kv.set(LS_WORKER_AUTH, dump_model(auth))

    async def get_admin_auth(self) -> AdminAuth | None:
        return load_model(await self._kv.get(LS_ADMIN_AUTH), AdminAuth, LS_ADMIN_AUTH)

    async def set_admin_auth(self, auth: AdminAuth | None) -> None:
        """写入 admin 身份，None 表示登出"""
        if auth is None:
            await self._kv.remove(LS_ADMIN_AUTH)
        else:
            await self._kv.set(LS_ADMIN_AUTH, dump_model(auth))
