"""
Configuration constants for flowpath.

All endpoints, timeouts, and tunable parameters are defined here.
Values can be overridden through environment variables or a local .env file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root is parent of flowpath/
PROJECT_ROOT = Path(__file__).parent.parent

# Pick up overrides from a .env file next to the project (if any)
load_dotenv(PROJECT_ROOT / ".env")

# =============================================================================
# Document Source Configuration
# =============================================================================

# REST endpoint returning the process definition as a JSON envelope
BPMN_URL = os.environ.get(
    "FLOWPATH_BPMN_URL",
    "https://elxkoom6p4.execute-api.eu-central-1.amazonaws.com/prod/engine-rest/process-definition/key/invoice/xml",
)

# JSON field of the envelope that holds the BPMN 2.0 XML
BPMN_XML_FIELD = "bpmn20Xml"

# Request timeout in seconds (applies to connect and read)
REQUEST_TIMEOUT = float(os.environ.get("FLOWPATH_REQUEST_TIMEOUT", "10"))

# User agent for requests
USER_AGENT = "flowpath/0.1 (BPMN path finder)"

# =============================================================================
# BPMN Parsing Configuration
# =============================================================================

# BeautifulSoup parser backend (lxml in XML mode)
XML_PARSER = "xml"

# Element names (local part, namespace prefix stripped) treated as graph nodes
BPMN_EVENT_TAGS = (
    "startEvent",
    "endEvent",
    "intermediateCatchEvent",
    "intermediateThrowEvent",
    "boundaryEvent",
)

BPMN_ACTIVITY_TAGS = (
    "task",
    "userTask",
    "serviceTask",
    "scriptTask",
    "businessRuleTask",
    "sendTask",
    "receiveTask",
    "manualTask",
    "callActivity",
    "subProcess",
    "transaction",
    "adHocSubProcess",
)

BPMN_GATEWAY_TAGS = (
    "exclusiveGateway",
    "inclusiveGateway",
    "parallelGateway",
    "complexGateway",
    "eventBasedGateway",
)

BPMN_FLOW_NODE_TAGS = BPMN_EVENT_TAGS + BPMN_ACTIVITY_TAGS + BPMN_GATEWAY_TAGS

# Kinds a process can be entered through (used by graph validation)
BPMN_ENTRY_KINDS = ("startEvent", "boundaryEvent")

# =============================================================================
# Logging Configuration
# =============================================================================

# Log level (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"
