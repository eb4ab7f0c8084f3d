"""Scripting host integration.

Public API:
    - PropertyBridge: reads properties from and sends commands to the player
    - DryRunPropertyBridge: bridge variant that records commands instead of running them
    - PlayerSession: read access that only exists while a track is loaded
    - ScriptTemplates / ScriptMode: template loading and rendering
    - HostScriptExecutor: runs scripts in a fresh host process
    - ProbeResponse / parse_batch_response: positional batch parsing
    - HostScriptError, HostSpawnError, HostExecutionError, MisalignedBatchResponseError
"""

from tunebridge.services.host.property_bridge import DryRunPropertyBridge, PlayerSession, PropertyBridge
from tunebridge.services.host.response_parser import (
    MisalignedBatchResponseError,
    ProbeResponse,
    parse_batch_response,
)
from tunebridge.services.host.script_executor import (
    HostExecutionError,
    HostScriptError,
    HostScriptExecutor,
    HostSpawnError,
)
from tunebridge.services.host.script_templates import ScriptMode, ScriptTemplates

__all__ = [
    "DryRunPropertyBridge",
    "HostExecutionError",
    "HostScriptError",
    "HostScriptExecutor",
    "HostSpawnError",
    "MisalignedBatchResponseError",
    "PlayerSession",
    "ProbeResponse",
    "PropertyBridge",
    "ScriptMode",
    "ScriptTemplates",
    "parse_batch_response",
]
