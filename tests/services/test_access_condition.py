# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime, timedelta, timezone

import pytest

from restproxy import errors as _err
from restproxy import resources
from restproxy.services import AccessCondition
from restproxy.services.access_condition import format_http_date


class TestAccessCondition:
    def test_none_has_no_header(self):
        condition = AccessCondition.none()

        assert condition.is_none
        assert condition.header == ""
        assert condition.formatted_value() == ""

    @pytest.mark.parametrize(
        "factory, header",
        [
            (AccessCondition.if_match, resources.IF_MATCH),
            (AccessCondition.if_none_match, resources.IF_NONE_MATCH),
        ],
    )
    def test_etag_conditions_pass_value_through(self, factory, header):
        condition = factory('"0x8CAFB82EFF70C46"')

        assert condition.header == header
        assert condition.formatted_value() == '"0x8CAFB82EFF70C46"'

    @pytest.mark.parametrize(
        "factory, header",
        [
            (AccessCondition.if_modified_since, resources.IF_MODIFIED_SINCE),
            (AccessCondition.if_unmodified_since, resources.IF_UNMODIFIED_SINCE),
        ],
    )
    def test_time_conditions_format_http_date(self, factory, header):
        condition = factory(datetime(2012, 10, 15, 10, 0))

        assert condition.header == header
        assert condition.formatted_value() == "Mon, 15 Oct 2012 10:00:00 GMT"

    def test_unknown_header_rejected(self):
        with pytest.raises(_err.InvalidArgumentError):
            AccessCondition("If-Range", "x")

    def test_immutable(self):
        condition = AccessCondition.if_match("x")

        with pytest.raises(AttributeError):
            condition.value = "y"


class TestFormatHttpDate:
    def test_converts_to_gmt(self):
        eastern = timezone(timedelta(hours=-4))

        actual = format_http_date(datetime(2012, 10, 15, 6, 0, tzinfo=eastern))

        assert actual == "Mon, 15 Oct 2012 10:00:00 GMT"
