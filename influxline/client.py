"""
Minimal HTTP client for the InfluxDB 2.x API, it glues the line
protocol encoder and the tabular decoder to a `requests.Session`:

``` python
from influxline import Client, Measurement, Query

client = Client("http://localhost:8086", token="my-token", org="my-org")
client.write("my-bucket", [
    Measurement.builder("m1").field("value", 1.5).build(),
])
records = client.query(
    Query('from(bucket: "my-bucket")')
    .then("range(start: -5m)")
    .then('filter(fn: (r) => r["_measurement"] == "m1")')
)
```

Timeout and ssl verification are controlled by
`influxline.utils.settings`.
"""
import requests

from .errors import TransportError
from .line_protocol import to_line_protocol_batch
from .tabular import parse
from .utils import logger, settings

__all__ = ["Client"]


class Client:
    def __init__(self, url, token, org, session=None):
        self.url = url.rstrip("/")
        self.org = org
        if session:
            self.session = session
        else:
            self.session = requests.Session()
        self.session.headers.update({"Authorization": f"Token {token}"})

    def _post(self, path, params, data, headers=None):
        url = f"{self.url}/api/v2/{path}"
        try:
            resp = self.session.post(
                url,
                params=params,
                data=data.encode(),
                headers=headers,
                timeout=settings.timeout,
                verify=settings.verify_ssl,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        if not resp.ok:
            raise TransportError(
                f"Non-success response from {url}: {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )
        return resp

    def write(self, bucket, measurements):
        """
        Write `measurements` into `bucket`. The payload is encoded
        before any request is made, so an invalid measurement sends
        nothing.
        """
        payload = to_line_protocol_batch(measurements)
        if not payload:
            return
        logger.debug("WRITE %s %s/%s", self.url, self.org, bucket)
        params = {"org": self.org, "bucket": bucket, "precision": "ns"}
        headers = {"Content-Type": "text/plain; charset=utf-8"}
        self._post("write", params, payload, headers=headers)

    def query(self, query):
        """
        Run `query` (a `Query` or a plain string) and return the list
        of records
        """
        logger.debug("QUERY %s %s", self.url, self.org)
        headers = {
            "Content-Type": "application/vnd.flux",
            "Accept": "application/csv",
        }
        resp = self._post("query", {"org": self.org}, str(query), headers=headers)
        return parse(resp.text)
