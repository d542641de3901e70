"""Optional HTTP sink: POST each report as JSON to a dashboard endpoint."""
import logging
import time

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


def make_session(retries=3, backoff=0.6):
    s = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=backoff,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["POST"]
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    return s


class ReportPoster:

    def __init__(self, url, session=None, timeout=5):
        self.url = url
        self.timeout = timeout
        self.session = session or make_session(retries=2, backoff=0.3)

    def post(self, json_payload):
        """
        Returns (True, elapsed_seconds) on success,
                (False, exception) on failure.
        """
        try:
            t0 = time.monotonic()
            r = self.session.post(self.url, json=json_payload, timeout=self.timeout)
            r.raise_for_status()
            return True, (time.monotonic() - t0)
        except requests.RequestException as e:
            return False, e

    def __call__(self, report):
        ok, info = self.post(report.to_dict())
        if ok:
            logger.debug(f"Posted report to {self.url} in {info:.2f}s")
        else:
            logger.warning(f"Failed to post report to {self.url}: {info}")
        return ok

    def close(self):
        self.session.close()
