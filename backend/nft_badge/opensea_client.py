"""
OpenSea API Client

Fetches the NFTs held by a wallet address.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.opensea.io/api/v2/chain/ethereum/account"
MAX_LIMIT = 50


class NFTRecord(BaseModel):
    """A single NFT as returned by OpenSea; unknown fields are kept."""
    model_config = ConfigDict(extra="allow")

    display_image_url: Optional[str] = None


async def fetch_nfts(
    address: str,
    count: int = 9,
    api_key: Optional[str] = None,
    base_url: str = DEFAULT_BASE_URL,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Optional[List[Dict[str, Any]]]:
    """
    Fetch up to ``count`` NFTs for ``address``.

    Returns:
        List of NFT dicts (possibly empty), or None if the request failed
    """
    limit = max(1, min(count, MAX_LIMIT))
    url = f"{base_url}/{address}/nfts"
    headers = {"accept": "application/json"}
    if api_key:
        headers["x-api-key"] = api_key

    client = http_client or httpx.AsyncClient(timeout=10.0)
    try:
        response = await client.get(url, params={"limit": limit}, headers=headers)
        if not response.is_success:
            logger.error(
                f"[OpenSea] Error fetching NFTs for {address}: "
                f"HTTP {response.status_code} {response.reason_phrase}"
            )
            return None

        data = response.json()
        nfts = data.get("nfts") or []
        return [
            NFTRecord.model_validate(nft).model_dump(exclude_none=True)
            for nft in nfts
        ]

    except Exception as e:
        logger.error(f"[OpenSea] Failed to fetch NFTs for {address}: {e}")
        return None

    finally:
        if http_client is None:
            await client.aclose()
