import pytest

from clinic.serializers.base import camelize, clean_text, underscore


@pytest.mark.parametrize('text', [
    'BP < 120 & HR > 60',
    'Take 1 tablet if pain > 5/10',
    'Tom & Jerry Clinic',
])
def test_clean_text_keeps_plain_characters(text):
    assert clean_text(text) == text


def test_clean_text_strips_tags():
    assert clean_text('  <b>bold</b> text ') == 'bold text'


def test_clean_text_strips_tags_hidden_behind_entities():
    cleaned = clean_text('&lt;script&gt;alert(1)&lt;/script&gt;Flu')
    assert '<script>' not in cleaned
    assert cleaned.endswith('Flu')


def test_clean_text_leaves_none_alone():
    assert clean_text(None) is None


def test_key_conversion_between_wire_and_model_names():
    assert camelize('patient_id') == 'patientId'
    assert underscore('dateOfBirth') == 'date_of_birth'
