# SPDX-License-Identifier: Apache-2.0

"""
Tests for structured log formatting.
"""

import json
import logging

from relief_api.observability.config import StructuredFormatter


def make_record(**extra):
    logger = logging.getLogger("relief_api.test")
    return logger.makeRecord(
        "relief_api.test", logging.INFO, __file__, 10, "Funds donated", (), None, extra=extra
    )


class TestStructuredFormatter:
    """Test the JSON log line layout."""

    def test_extra_fields_land_in_data(self):
        line = json.loads(StructuredFormatter().format(make_record(disaster_id=1, amount=250)))

        assert line["message"] == "Funds donated"
        assert line["level"] == "INFO"
        assert line["logger"] == "relief_api.test"
        assert line["data"] == {"disaster_id": 1, "amount": 250}

    def test_no_extra_fields(self):
        line = json.loads(StructuredFormatter().format(make_record()))

        assert "data" not in line
        assert "trace_id" not in line
