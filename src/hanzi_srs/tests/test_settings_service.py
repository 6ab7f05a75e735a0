"""Tests for study range settings."""
import pytest

from hanzi_srs.exceptions import AuthenticationError, RangeValidationError
from hanzi_srs.models.review_models import StudyRange
from hanzi_srs.services.settings_service import SettingsService


@pytest.fixture
def settings_service(storage) -> SettingsService:
    return SettingsService(storage)


def test_default_range(settings_service, user):
    assert settings_service.get_study_range(user.id) == StudyRange(1, 1000)


def test_update_both_bounds(settings_service, storage, user):
    result = settings_service.update_study_range(
        user.id, {"studyRangeStart": 100, "studyRangeEnd": 200}
    )
    assert result == StudyRange(100, 200)
    assert storage.find_user_range(user.id) == (100, 200)


def test_update_single_bound_keeps_other(settings_service, user):
    settings_service.update_study_range(user.id, {"studyRangeStart": 100, "studyRangeEnd": 200})
    result = settings_service.update_study_range(user.id, {"studyRangeEnd": 500})
    assert result == StudyRange(100, 500)


def test_start_equal_to_end_is_allowed(settings_service, user):
    assert settings_service.update_study_range(
        user.id, {"studyRangeStart": 5, "studyRangeEnd": 5}
    ) == StudyRange(5, 5)


@pytest.mark.parametrize("payload", [
    {},
    {"studyRangeStart": None, "studyRangeEnd": None},
    {"studyRangeStart": 0},
    {"studyRangeEnd": -3},
    {"studyRangeStart": 1001},
    {"studyRangeStart": "10"},
    {"studyRangeStart": 2.5},
    {"studyRangeEnd": True},
    {"studyRangeStart": 300, "studyRangeEnd": 200},
])
def test_invalid_ranges_rejected(settings_service, storage, user, payload):
    with pytest.raises(RangeValidationError):
        settings_service.update_study_range(user.id, payload)
    assert storage.find_user_range(user.id) == (None, None)


def test_merged_range_must_be_ordered(settings_service, user):
    settings_service.update_study_range(user.id, {"studyRangeStart": 100, "studyRangeEnd": 200})
    with pytest.raises(RangeValidationError):
        settings_service.update_study_range(user.id, {"studyRangeStart": 250})


def test_update_requires_user(settings_service):
    with pytest.raises(AuthenticationError):
        settings_service.update_study_range("", {"studyRangeStart": 1})
