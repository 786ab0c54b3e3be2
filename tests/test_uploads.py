"""
Tests for upload helpers.
"""
import io
from types import SimpleNamespace

import pytest
from graphql import GraphQLError
from starlette.datastructures import UploadFile

from gqlplug.uploads import (
    UPLOADS_KEY,
    Upload,
    collect_uploads,
    get_upload,
    uploads_from_context,
)


def make_upload(name: str) -> UploadFile:
    return UploadFile(file=io.BytesIO(b"data"), filename=name)


class TestUploads:
    def test_collect_picks_only_files(self):
        upload = make_upload("a.txt")

        assert collect_uploads({"query": "{ a }", "a": upload}) == {"a": upload}

    def test_uploads_from_context(self):
        upload = make_upload("a.txt")

        context = {UPLOADS_KEY: {"uploads": {"a": upload}}}

        assert uploads_from_context(context) == {"a": upload}
        assert uploads_from_context(None) == {}
        assert uploads_from_context({}) == {}

    def test_get_upload(self):
        upload = make_upload("a.txt")
        info = SimpleNamespace(context={UPLOADS_KEY: {"uploads": {"a": upload}}})

        assert get_upload(info, "a") is upload

    def test_get_missing_upload(self):
        info = SimpleNamespace(context={UPLOADS_KEY: {"uploads": {}}})

        with pytest.raises(GraphQLError) as exc_info:
            get_upload(info, "a")

        assert exc_info.value.message == (
            'Argument refers to upload "a", but no such file was uploaded.'
        )

    def test_scalar_accepts_part_names(self):
        assert Upload.parse_value("users_csv") == "users_csv"

    @pytest.mark.parametrize("value", ["", 1, None])
    def test_scalar_rejects_other_values(self, value):
        with pytest.raises(GraphQLError):
            Upload.parse_value(value)
