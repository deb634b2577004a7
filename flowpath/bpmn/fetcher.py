"""
Fetch BPMN process definitions from a REST endpoint or a local file.

The REST endpoint (Camunda's `process-definition/.../xml`) answers with a
JSON envelope whose `bpmn20Xml` field holds the actual XML document.
"""

from __future__ import annotations

import codecs
import json
import logging
from pathlib import Path

import requests

from flowpath.config import BPMN_URL, BPMN_XML_FIELD, REQUEST_TIMEOUT, USER_AGENT
from flowpath.exceptions import DocumentFormatError

logger = logging.getLogger(__name__)


def unwrap_envelope(payload: object) -> str:
    """
    Extract the BPMN XML from a decoded JSON envelope.

    Raises:
        DocumentFormatError: If the payload is not an object with a string XML field
    """
    if not isinstance(payload, dict):
        raise DocumentFormatError("Expected a JSON object as process definition envelope")

    xml = payload.get(BPMN_XML_FIELD)
    if not isinstance(xml, str) or not xml.strip():
        raise DocumentFormatError(f"Envelope has no '{BPMN_XML_FIELD}' field")
    return xml


class BpmnFetcher:
    """
    Retrieves BPMN XML documents.

    Remote documents are fetched with a shared requests session; local
    files may hold either the JSON envelope or the raw XML.
    """

    def __init__(self, url: str = BPMN_URL, timeout: float = REQUEST_TIMEOUT) -> None:
        """
        Initialize the fetcher.

        Args:
            url: Endpoint returning the JSON envelope
            timeout: Request timeout in seconds
        """
        self._url = url
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})

    @property
    def url(self) -> str:
        return self._url

    def fetch_xml(self) -> str:
        """
        Download the process definition and return its XML.

        Raises:
            requests.RequestException: If the request fails or times out
            DocumentFormatError: If the response is not the expected envelope
        """
        logger.info(f"Fetching process definition from {self._url}")

        response = self._session.get(self._url, timeout=self._timeout)
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as e:
            raise DocumentFormatError(f"Response from {self._url} is not valid JSON") from e

        xml = unwrap_envelope(payload)
        logger.debug(f"Received {len(xml):,} characters of BPMN XML")
        return xml

    def load_file(self, path: str | Path) -> str | bytes:
        """
        Read a process definition from disk.

        A file whose content starts with '{' (after an optional UTF-8 BOM) is
        treated as a JSON envelope. Anything else is returned as raw bytes so
        the XML parser can honour the document's own encoding declaration.

        Raises:
            OSError: If the file cannot be read
            DocumentFormatError: If a JSON file is not the expected envelope
        """
        path = Path(path)
        logger.info(f"Loading process definition from {path}")
        data = path.read_bytes()

        if data.removeprefix(codecs.BOM_UTF8).lstrip().startswith(b"{"):
            try:
                payload = json.loads(data.decode("utf-8-sig"))
            except UnicodeDecodeError as e:
                raise DocumentFormatError(f"{path} is not UTF-8 encoded JSON: {e}") from e
            except json.JSONDecodeError as e:
                raise DocumentFormatError(f"{path} is not valid JSON: {e}") from e
            return unwrap_envelope(payload)

        return data

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> BpmnFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
