# prr_engine/infrastructure/cache/redis_client.py

from typing import List, Optional

import redis.asyncio as redis

# KEYS[1]=document, KEYS[2]=version, KEYS[3]=index zset
# ARGV[1]=payload, ARGV[2]=expected version ('' = must not exist), ARGV[3]=new version,
# ARGV[4]=index member, ARGV[5]=index score
_COMPARE_AND_SET_SCRIPT = """
local current = redis.call('get', KEYS[2])
if ARGV[2] == '' then
  if current then return 0 end
elseif current ~= ARGV[2] then
  return 0
end
redis.call('set', KEYS[1], ARGV[1])
redis.call('set', KEYS[2], ARGV[3])
redis.call('zadd', KEYS[3], ARGV[5], ARGV[4])
return 1
"""


class RedisClient:
    def __init__(self, redis_url: str):
        self.client = redis.from_url(
            redis_url,
            decode_responses=True,
        )

    async def get(self, key: str) -> str | None:
        """Get value for key. Returns None if key does not exist."""
        return await self.client.get(key)

    async def set(self, key: str, value: str) -> None:
        await self.client.set(key, value)

    async def compare_and_set(
        self,
        key: str,
        version_key: str,
        index_key: str,
        value: str,
        expected_version: Optional[int],
        new_version: int,
        index_member: str,
        index_score: float,
    ) -> bool:
        """
        Atomically write value and new_version, and index index_member at
        index_score, if the stored version equals expected_version (or, when
        expected_version is None, if none is stored). Returns True if written.
        """
        expected = "" if expected_version is None else str(expected_version)
        result = await self.client.eval(
            _COMPARE_AND_SET_SCRIPT,
            3,
            key,
            version_key,
            index_key,
            value,
            expected,
            str(new_version),
            index_member,
            repr(float(index_score)),
        )
        return bool(result)

    async def zrevrange(self, key: str, start: int = 0, end: int = -1) -> List[str]:
        """Members from highest to lowest score."""
        return await self.client.zrevrange(key, start, end)

    async def rpush(self, key: str, value: str) -> int:
        """Append to list tail. Returns new list length."""
        return await self.client.rpush(key, value)

    async def lrange(self, key: str, start: int = 0, end: int = -1) -> List[str]:
        return await self.client.lrange(key, start, end)

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def close(self) -> None:
        await self.client.aclose()
