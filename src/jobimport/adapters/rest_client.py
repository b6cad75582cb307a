import io
from logging import getLogger
from typing import Any, BinaryIO

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import HttpConfig
from ..core.model import Credentials
from ..core.ports import Transport
from ..core.utils import is_folder_class
from ..errors import TransportError

logger = getLogger(__name__)

#: Jenkins adds ``_class`` to every job on its own; ``jobs`` is only requested
#: to tell folders of unknown classes apart from plain jobs.
TREE_QUERY = "jobs[name,url,description,jobs[name]]"


def requests_retry_session(
    retries=3,
    backoff_factor=0.5,
    status_forcelist=(429, 500, 502, 503, 504),
    session=None,
):
    session = session or requests.Session()
    retry = Retry(
        total=retries,
        read=retries,
        connect=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=frozenset(["GET"]),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class RestApiClient(Transport):
    """Reads item listings and config.xml files through the Jenkins REST API."""

    def __init__(self, http: HttpConfig | None = None, session: requests.Session | None = None):
        self.http = http or HttpConfig()
        self.session = session or requests_retry_session(
            retries=self.http.retries,
            backoff_factor=self.http.backoff_factor,
            status_forcelist=self.http.status_forcelist,
        )

    def _get(self, url: str, credentials: Credentials, **kwargs: Any) -> requests.Response:
        auth = None if credentials.anonymous else (credentials.username, credentials.password)
        try:
            resp = self.session.get(url, auth=auth, timeout=self.http.timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc
        return resp

    def fetch_item_tree(self, url: str, credentials: Credentials) -> list[dict[str, Any]]:
        api_url = url.rstrip("/") + "/api/json"
        resp = self._get(api_url, credentials, params={"tree": TREE_QUERY})
        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError(f"Malformed item listing from {api_url}: {exc}", url=url) from exc

        if not isinstance(data, dict):
            raise TransportError(f"Malformed item listing from {api_url}", url=url)

        jobs = data.get("jobs") or []
        if not isinstance(jobs, list) or not all(isinstance(job, dict) for job in jobs):
            raise TransportError(f"Malformed item listing from {api_url}: bad jobs entry", url=url)

        logger.debug("Fetched %d items from %s", len(jobs), api_url)
        return [self._node(job) for job in jobs]

    @staticmethod
    def _node(job: dict[str, Any]) -> dict[str, Any]:
        impl = job.get("_class", "")
        return {
            "name": job.get("name"),
            "impl": impl,
            "url": job.get("url"),
            "description": job.get("description"),
            "is_folder": is_folder_class(impl) or "jobs" in job,
        }

    def fetch_config(self, url: str, credentials: Credentials) -> BinaryIO:
        resp = self._get(url, credentials)
        try:
            return io.BytesIO(resp.content)
        finally:
            resp.close()
