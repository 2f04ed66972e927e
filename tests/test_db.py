"""Tests for the DynamoDB query builder (moto)."""

import pytest

from shared import config
from shared.db import SINGLE_ROW_ERROR, DataClient, Result, build_update_expression


def _seed(client: DataClient, rows: list[dict]) -> list[dict]:
    result = client.table("blogs").insert(rows).execute()
    assert result.ok, result.error
    return result.data


class TestInsertAndSelect:
    def test_insert_assigns_id_and_timestamps(self, data_client):
        row = _seed(data_client, [{"user_id": "u1", "title": "A"}])[0]
        assert row["id"]
        assert row["created_at"] == row["updated_at"]

    def test_eq_filters_combine(self, data_client):
        _seed(
            data_client,
            [
                {"user_id": "u1", "status": "draft"},
                {"user_id": "u1", "status": "published"},
                {"user_id": "u2", "status": "draft"},
            ],
        )
        result = data_client.table("blogs").select().eq("user_id", "u1").eq("status", "draft").execute()
        assert result.ok
        assert len(result.data) == 1

    def test_in_filter_and_empty_in(self, data_client):
        rows = _seed(data_client, [{"user_id": "u1"}, {"user_id": "u1"}, {"user_id": "u1"}])
        ids = [rows[0]["id"], rows[2]["id"]]

        picked = data_client.table("blogs").select("id").in_("id", ids).execute()
        assert sorted(r["id"] for r in picked.data) == sorted(ids)

        nothing = data_client.table("blogs").select().in_("id", []).execute()
        assert nothing.data == []

    def test_select_columns_projects(self, data_client):
        _seed(data_client, [{"user_id": "u1", "title": "A", "content": "body"}])
        row = data_client.table("blogs").select("title, missing").execute().data[0]
        assert row == {"title": "A", "missing": None}

    def test_numbers_come_back_as_int(self, data_client):
        _seed(data_client, [{"user_id": "u1", "reading_time": 3}])
        row = data_client.table("blogs").select().execute().data[0]
        assert row["reading_time"] == 3
        assert type(row["reading_time"]) is int


class TestOrderAndRange:
    def _rows(self, data_client):
        _seed(
            data_client,
            [
                {"user_id": "u1", "title": "old", "published_at": "2026-01-01T00:00:00+00:00"},
                {"user_id": "u1", "title": "new", "published_at": "2026-03-01T00:00:00+00:00"},
                {"user_id": "u1", "title": "never", "published_at": None},
                {"user_id": "u1", "title": "mid", "published_at": "2026-02-01T00:00:00+00:00"},
            ],
        )

    def test_descending_puts_nulls_first(self, data_client):
        self._rows(data_client)
        result = data_client.table("blogs").select("title").order("published_at", ascending=False).execute()
        assert [r["title"] for r in result.data] == ["never", "new", "mid", "old"]

    def test_ascending_puts_nulls_last(self, data_client):
        self._rows(data_client)
        result = data_client.table("blogs").select("title").order("published_at").execute()
        assert [r["title"] for r in result.data] == ["old", "mid", "new", "never"]

    def test_range_is_inclusive(self, data_client):
        self._rows(data_client)
        result = (
            data_client.table("blogs")
            .select("title")
            .order("published_at")
            .range(1, 2)
            .execute()
        )
        assert [r["title"] for r in result.data] == ["mid", "new"]


class TestSingle:
    def test_single_row(self, data_client):
        _seed(data_client, [{"user_id": "u1", "slug": "only"}])
        result = data_client.table("blogs").select().eq("slug", "only").single().execute()
        assert result.ok
        assert result.data["slug"] == "only"

    def test_no_rows_is_an_error(self, data_client):
        result = data_client.table("blogs").select().eq("slug", "nope").single().execute()
        assert result.error == SINGLE_ROW_ERROR
        assert result.data is None

    def test_many_rows_is_an_error(self, data_client):
        _seed(data_client, [{"user_id": "u1", "slug": "dup"}, {"user_id": "u1", "slug": "dup"}])
        result = data_client.table("blogs").select().eq("slug", "dup").single().execute()
        assert result.error == SINGLE_ROW_ERROR


class TestUpdateAndDelete:
    def test_update_only_matching_rows(self, data_client):
        rows = _seed(data_client, [{"user_id": "u1", "status": "draft"}, {"user_id": "u2", "status": "draft"}])

        result = data_client.table("blogs").update({"status": "published"}).eq("user_id", "u1").execute()
        assert len(result.data) == 1
        assert result.data[0]["status"] == "published"

        other = data_client.table("blogs").select().eq("id", rows[1]["id"]).single().execute()
        assert other.data["status"] == "draft"

    def test_update_refreshes_updated_at_and_keeps_id(self, data_client):
        row = _seed(data_client, [{"user_id": "u1"}])[0]
        result = (
            data_client.table("blogs")
            .update({"id": "hijack", "title": "T"})
            .eq("id", row["id"])
            .single()
            .execute()
        )
        assert result.data["id"] == row["id"]
        assert result.data["updated_at"] >= row["updated_at"]

    def test_update_without_match_returns_empty(self, data_client):
        result = data_client.table("blogs").update({"title": "x"}).eq("id", "missing").execute()
        assert result.ok
        assert result.data == []

    def test_delete_returns_deleted_rows(self, data_client):
        rows = _seed(data_client, [{"user_id": "u1"}, {"user_id": "u2"}])
        result = data_client.table("blogs").delete().eq("user_id", "u1").execute()
        assert [r["id"] for r in result.data] == [rows[0]["id"]]
        assert len(data_client.table("blogs").select().execute().data) == 1


class TestEmbed:
    def test_nested_join_shape(self, data_client):
        blog = _seed(data_client, [{"user_id": "u1", "title": "A"}])[0]
        tag = data_client.table("blog_tags").insert([{"user_id": "u1", "name": "Py"}]).single().execute().data
        data_client.table("blog_post_tags").insert(
            [
                {"blog_id": blog["id"], "tag_id": tag["id"]},
                {"blog_id": blog["id"], "tag_id": "deleted-tag"},
            ]
        ).execute()

        result = (
            data_client.table("blogs")
            .select("id, title")
            .embed(
                "tags",
                through="blog_post_tags",
                local="blog_id",
                remote="tag_id",
                target="blog_tags",
                key="tag",
                columns="name",
            )
            .single()
            .execute()
        )
        tags = result.data["tags"]
        assert {"tag": {"name": "Py"}} in tags
        assert {"tag": None} in tags
        assert len(tags) == 2

    def test_rows_without_links_get_empty_list(self, data_client):
        _seed(data_client, [{"user_id": "u1"}])
        result = (
            data_client.table("blogs")
            .select()
            .embed(
                "tags",
                through="blog_post_tags",
                local="blog_id",
                remote="tag_id",
                target="blog_tags",
                key="tag",
            )
            .execute()
        )
        assert result.data[0]["tags"] == []


class TestErrors:
    def test_missing_table_is_an_error_result(self, data_client):
        result = data_client.table("no_such_table").select().execute()
        assert isinstance(result, Result)
        assert result.error
        assert result.data is None

    def test_missing_region_raises_configuration_error(self, monkeypatch):
        from shared.db import get_client

        monkeypatch.setattr(config, "AWS_REGION", "")
        with pytest.raises(config.ConfigurationError) as exc:
            get_client()
        assert exc.value.missing == ["AWS_REGION"]

    @pytest.mark.parametrize("value", ["a week", "", "0", "-5"])
    def test_malformed_session_ttl_raises_configuration_error(self, monkeypatch, value):
        monkeypatch.setattr(config, "SESSION_TTL_MINUTES", value)
        with pytest.raises(config.ConfigurationError) as exc:
            config.session_ttl_minutes()
        assert exc.value.missing == ["SESSION_TTL_MINUTES"]

    def test_session_ttl_parsed_from_string(self, monkeypatch):
        monkeypatch.setattr(config, "SESSION_TTL_MINUTES", "90")
        assert config.session_ttl_minutes() == 90


def test_build_update_expression_aliases_names():
    expr, names, values = build_update_expression({"status": "draft", "name": "x"})
    assert expr == "SET #k0 = :v0, #k1 = :v1"
    assert names == {"#k0": "status", "#k1": "name"}
    assert values == {":v0": "draft", ":v1": "x"}
