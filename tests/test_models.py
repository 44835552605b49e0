from datetime import datetime, timezone

import pytest

from modportal.constants import FactorioVersion
from modportal.exceptions import ParseError
from modportal.models import (
    DependencyPrefix,
    ModCategory,
    ModDetail,
    ModPage,
    ModSummary,
    ParsedVersion,
    RawVersion,
    ReleaseRecord,
)


def test_summary_from_api(summary_payload):
    mod = ModSummary.from_api(summary_payload)
    assert mod.latest_release is None
    assert mod.downloads_count == 15
    assert mod.name == "015_like_infinite_research"
    assert mod.owner == "marshkip"
    assert len(mod.releases) == 1
    assert mod.title == "infinite research (0.15 like)"
    assert mod.category_kind == ModCategory.CONTENT
    assert mod.thumbnail_url.startswith("https://assets-mod.factorio.com/assets/")


def test_release_from_api(release_payload):
    release = ReleaseRecord.from_api(release_payload)
    assert isinstance(release.version, ParsedVersion)
    assert str(release.version) == "0.1.0"
    assert release.file_name == "flib_0.1.0.zip"
    assert release.released_at == datetime(
        2020, 5, 24, 19, 15, 48, 520000, tzinfo=timezone.utc
    )
    assert release.factorio_version == "0.18"
    [dep] = release.dependencies
    assert dep.name == "base"
    assert dep.prefix == DependencyPrefix.REQUIRED


def test_release_keeps_raw_version(release_payload):
    release_payload["version"] = "0.0.07"
    release = ReleaseRecord.from_api(release_payload)
    assert release.version == RawVersion("0.0.07")
    assert not release.is_semver


def test_release_with_bad_dependency_fails(release_payload):
    release_payload["info_json"]["dependencies"] = ["base"]
    with pytest.raises(ParseError):
        ReleaseRecord.from_api(release_payload)


def test_detail_from_api(summary_payload):
    payload = dict(
        summary_payload,
        changelog="",
        created_at="2016-11-11T07:07:20.000000Z",
        github_path="",
        tags=["combat"],
        license={"id": "default_mit", "name": "mit", "title": "MIT", "description": ""},
        deprecated=True,
    )
    detail = ModDetail.from_api(payload)
    assert detail.tags == ("combat",)
    assert detail.license.title == "MIT"
    assert detail.deprecated
    assert detail.created_at.year == 2016
    assert detail.to_summary().latest_release is detail.releases[-1]


def test_unknown_category_maps_to_no_category():
    assert ModCategory.parse("something-new") == ModCategory.NO_CATEGORY
    assert ModCategory.parse(None) == ModCategory.NO_CATEGORY


def test_page_from_api(summary_payload):
    page = ModPage.from_api(
        {
            "pagination": {
                "count": 30,
                "page": 1,
                "page_count": 2,
                "page_size": 25,
                "links": {"next": "https://mods.factorio.com/api/mods?page=2"},
            },
            "results": [summary_payload],
        }
    )
    assert page.pagination.has_next
    assert page.results[0].name == "015_like_infinite_research"


def test_factorio_version_parse():
    assert FactorioVersion.parse("1.1") is FactorioVersion.V1_1
    assert FactorioVersion.parse("3.0") == "3.0"
    assert str(FactorioVersion.V0_18) == "0.18"
