"""Read and write turn records.

Records are accepted as a JSON array, as a ``{"nodes": [...]}`` run object,
or as JSONL with one record per line. Field names may be snake_case or the
execution engine's camelCase.

An engine node that carries both the human message and the agent reply is
split into a human turn followed by an agent turn; records that named the
combined node as their parent are re-attached to the agent half, since the
conversation continues after the reply.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from pydantic import ValidationError

from ..core.exceptions import RecordFormatError
from ..core.types import TurnRecord
from .logger import get_logger

logger = get_logger("records")

AGENT_SUFFIX = ":agent"

# Engine payload fields kept as diagnostics rather than record fields
DIAGNOSTIC_FIELDS = (
    "controllerOutput",
    "executionResult",
    "knownFactsBefore",
    "knownFactsAfter",
    "contractVersion",
    "designVersionHash",
)


def _get(payload: Dict[str, Any], snake: str, camel: str, default=None):
    if snake in payload:
        return payload[snake]
    return payload.get(camel, default)


def from_engine_node(node: Dict[str, Any]) -> List[TurnRecord]:
    """Convert one engine node payload into one or two turn records.

    Raises:
        ValidationError: If the payload does not describe a valid turn
    """
    user_message = _get(node, "user_message", "userMessage")
    agent_message = _get(node, "agent_message", "agentMessage")

    if user_message is None or agent_message is None:
        return [TurnRecord.model_validate(node)]

    node_id = _get(node, "node_id", "nodeId")
    diagnostics = dict(node.get("diagnostics") or {})
    for name in DIAGNOSTIC_FIELDS:
        if name in node:
            diagnostics[name] = node[name]

    common = {
        "branch_id": _get(node, "branch_id", "branchId"),
        "timestamp": node.get("timestamp"),
        "status": node.get("status", "VALID"),
    }
    common = {key: value for key, value in common.items() if value is not None}
    turn_number = _get(node, "turn_number", "turnNumber", 0)

    human = TurnRecord(
        node_id=node_id,
        parent_node_id=_get(node, "parent_node_id", "parentNodeId"),
        turn_number=turn_number,
        user_message=user_message,
        **common,
    )
    agent = TurnRecord(
        node_id=f"{node_id}{AGENT_SUFFIX}",
        parent_node_id=node_id,
        turn_number=turn_number,
        agent_message=agent_message,
        diagnostics=diagnostics,
        **common,
    )
    return [human, agent]


def parse_records(payloads: Iterable[Dict[str, Any]], source: str = "<records>") -> List[TurnRecord]:
    """Validate raw payloads into records, splitting combined engine nodes.

    Raises:
        RecordFormatError: If any payload is not a valid turn
    """
    records: List[TurnRecord] = []
    split_ids = set()

    for index, payload in enumerate(payloads):
        if not isinstance(payload, dict):
            raise RecordFormatError(source, f"entry {index} is not an object")
        try:
            converted = from_engine_node(payload)
        except ValidationError as e:
            raise RecordFormatError(source, f"entry {index}: {e}") from e
        if len(converted) == 2:
            split_ids.add(converted[0].node_id)
        records.extend(converted)

    if not split_ids:
        return records

    # Continuations of a combined node hang off its agent half
    remapped = []
    for record in records:
        parent = record.parent_node_id
        if parent in split_ids and not record.node_id == f"{parent}{AGENT_SUFFIX}":
            record = record.model_copy(
                update={"parent_node_id": f"{parent}{AGENT_SUFFIX}"}
            )
        remapped.append(record)
    logger.debug(f"Split {len(split_ids)} combined engine nodes from {source}")
    return remapped


def _read_payloads(text: str, source: str) -> List[Dict[str, Any]]:
    stripped = text.strip()
    if not stripped:
        return []

    if stripped[0] in "[{":
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            if "nodes" in data:
                nodes = data["nodes"]
                if not isinstance(nodes, list):
                    raise RecordFormatError(source, '"nodes" must be a list')
                return nodes
            # A single-line JSONL file holding one record
            return [data]

    payloads = []
    for line_num, line in enumerate(stripped.splitlines(), 1):
        line = line.strip()
        if not line:
            continue
        try:
            payloads.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise RecordFormatError(source, f"line {line_num}: {e.msg}") from e
    return payloads


def load_records(path: Union[str, Path]) -> List[TurnRecord]:
    """Load turn records from a JSON or JSONL file.

    Raises:
        FileNotFoundError: If the file does not exist
        RecordFormatError: If the content cannot be parsed
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        text = f.read()

    records = parse_records(_read_payloads(text, str(path)), source=str(path))
    logger.debug(f"Loaded {len(records)} records from {path}")
    return records


def save_records(records: Iterable[TurnRecord], path: Union[str, Path]) -> Path:
    """Write records as JSONL, one record per line, using engine field names."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record.model_dump(mode="json", by_alias=True)) + "\n")
    return path
