"""Tests for the data models."""

import pytest

from projets_indexer.indexer.models import Project, ProjectStatus


class TestProjectStatus:
    def test_values_are_index_literals(self):
        assert [s.value for s in ProjectStatus] == ["Active", "OnHold", "Archived"]

    def test_str(self):
        assert str(ProjectStatus.ON_HOLD) == "OnHold"


class TestProject:
    def test_tags_default_to_empty_list(self):
        a = Project("a", "c", ProjectStatus.ACTIVE)
        b = Project("b", "c", ProjectStatus.ACTIVE)
        assert a.tags == []
        assert a.tags is not b.tags

    def test_dict_round_trip(self):
        project = Project("alpha", "web", ProjectStatus.ARCHIVED, ["x"], "/p/alpha")
        assert Project.from_dict(project.to_dict()) == project

    def test_to_dict_copies_tags(self):
        project = Project("alpha", "web", ProjectStatus.ACTIVE, ["x"], "/p/alpha")
        project.to_dict()["tags"].append("y")
        assert project.tags == ["x"]

    @pytest.mark.parametrize("status", ["onhold", "ACTIVE", "Unknown"])
    def test_from_dict_status_literals_are_case_sensitive(self, status):
        record = {"name": "a", "category": "c", "status": status, "tags": [], "path": "/a"}
        with pytest.raises(ValueError, match="unknown status"):
            Project.from_dict(record)
