import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from leaf_detector.core.errors import KnowledgeBaseError
from leaf_detector.core.types import DiseaseInfo, Severity

DEFAULT_KEY = 'default'


def _string_list(value) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(item).strip() for item in value if str(item).strip())


def _parse_entry(row: dict) -> DiseaseInfo:
    # the on-disk table uses the singular "treatment"/"prevention" keys
    return DiseaseInfo(
        description=str(row.get('description') or '').strip(),
        symptoms=_string_list(row.get('symptoms')),
        treatments=_string_list(row.get('treatment', row.get('treatments'))),
        preventions=_string_list(row.get('prevention', row.get('preventions'))),
        severity=Severity.parse(row.get('severity')),
    )


class DiseaseKnowledgeBase:
    """Read-only mapping from a disease identifier to guidance and severity.

    Build it once at startup and pass it to whatever needs lookups.
    """

    def __init__(self, entries: Mapping[str, DiseaseInfo]):
        if DEFAULT_KEY not in entries:
            raise KnowledgeBaseError(f'Knowledge base has no {DEFAULT_KEY!r} entry.')
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def from_path(cls, path: str) -> 'DiseaseKnowledgeBase':
        resolved = cls._resolve_path(path)
        if not resolved.exists():
            raise KnowledgeBaseError(f'Knowledge base file not found: {resolved}', details={'path': str(resolved)})
        try:
            raw = json.loads(resolved.read_text(encoding='utf-8'))
        except json.JSONDecodeError as exc:
            raise KnowledgeBaseError(f'Knowledge base is not valid JSON: {resolved}') from exc
        return cls.from_mapping(raw)

    @classmethod
    def from_mapping(cls, raw) -> 'DiseaseKnowledgeBase':
        if not isinstance(raw, dict):
            raise KnowledgeBaseError('Knowledge base must be a JSON object keyed by disease identifier.')
        entries = {
            str(key): _parse_entry(row)
            for key, row in raw.items()
            if isinstance(row, dict)
        }
        return cls(entries)

    @staticmethod
    def _resolve_path(path: str) -> Path:
        candidate = Path(path)
        if candidate.exists() or candidate.is_absolute():
            return candidate
        fallback = Path(__file__).resolve().parents[1] / 'data' / 'diseases.json'
        if fallback.exists():
            return fallback
        return candidate

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def identifiers(self) -> tuple[str, ...]:
        return tuple(key for key in self._entries if key != DEFAULT_KEY)

    @property
    def default(self) -> DiseaseInfo:
        return self._entries[DEFAULT_KEY]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def lookup(self, identifier: str) -> DiseaseInfo:
        if not isinstance(identifier, str):
            return self.default
        return self._entries.get(identifier, self._entries[DEFAULT_KEY])
