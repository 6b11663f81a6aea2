import json

import pytest

from leaf_detector.core.errors import KnowledgeBaseError
from leaf_detector.core.knowledge_base import DiseaseKnowledgeBase
from leaf_detector.core.types import DiseaseInfo, Severity


def test_lookup_unknown_identifier_returns_default_entry():
    knowledge_base = DiseaseKnowledgeBase.from_path('leaf_detector/data/diseases.json')

    info = knowledge_base.lookup('nonexistent-key')

    assert info == knowledge_base.default
    assert info.severity is Severity.UNKNOWN
    assert info.description == 'A plant disease affecting tomato leaves.'


def test_lookup_early_blight_is_medium_severity():
    knowledge_base = DiseaseKnowledgeBase.from_path('leaf_detector/data/diseases.json')

    info = knowledge_base.lookup('Early_Blight')

    assert info.severity is Severity.MEDIUM
    assert info.symptoms[0] == 'Dark spots with concentric rings'
    assert 'Apply copper-based fungicides' in info.treatments
    assert len(info.preventions) == 3


def test_packaged_table_severities():
    knowledge_base = DiseaseKnowledgeBase.from_path('leaf_detector/data/diseases.json')

    assert knowledge_base.size == 4
    assert set(knowledge_base.identifiers) == {'Spotted_Wilt virus', 'Early_Blight', 'Late_Blight'}
    assert knowledge_base.lookup('Late_Blight').severity is Severity.CRITICAL
    assert knowledge_base.lookup('Spotted_Wilt virus').severity is Severity.HIGH


def test_lookup_is_total_for_odd_identifiers():
    knowledge_base = DiseaseKnowledgeBase.from_mapping({'default': {'description': 'fallback'}})

    assert knowledge_base.lookup('').description == 'fallback'
    assert knowledge_base.lookup(None).description == 'fallback'  # type: ignore[arg-type]
    assert knowledge_base.lookup(['Early_Blight']).description == 'fallback'  # type: ignore[arg-type]


def test_unrecognized_severity_maps_to_unknown():
    knowledge_base = DiseaseKnowledgeBase.from_mapping(
        {
            'default': {'description': 'fallback', 'severity': 'Unknown'},
            'Leaf_Mold': {'description': 'mold', 'severity': 'catastrophic'},
            'Septoria': {'description': 'spots', 'severity': 'high'},
        }
    )

    assert knowledge_base.lookup('Leaf_Mold').severity is Severity.UNKNOWN
    assert knowledge_base.lookup('Septoria').severity is Severity.HIGH


def test_table_without_default_entry_is_rejected(tmp_path):
    path = tmp_path / 'diseases.json'
    path.write_text(json.dumps({'Early_Blight': {'description': 'x', 'severity': 'Medium'}}), encoding='utf-8')

    with pytest.raises(KnowledgeBaseError):
        DiseaseKnowledgeBase.from_path(str(path))


def test_invalid_json_is_rejected(tmp_path):
    path = tmp_path / 'diseases.json'
    path.write_text('{not json', encoding='utf-8')

    with pytest.raises(KnowledgeBaseError):
        DiseaseKnowledgeBase.from_path(str(path))


def test_entries_are_read_only():
    knowledge_base = DiseaseKnowledgeBase({'default': DiseaseInfo(description='fallback')})

    with pytest.raises(TypeError):
        knowledge_base._entries['Early_Blight'] = DiseaseInfo(description='x')  # type: ignore[index]
