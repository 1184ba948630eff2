"""Tests for the shared service providers."""

import sys

sys.path.append("src")

from leapscan.webapi.dependencies import (
    get_market_data_service,
    get_options_data_service,
    get_screening_service,
    reset_services,
)


class TestServiceProviders:
    def setup_method(self):
        reset_services()

    def teardown_method(self):
        reset_services()

    def test_shared_instances(self):
        """Test the screening service reuses the shared data services."""
        screening = get_screening_service()

        assert screening is get_screening_service()
        assert screening.market_data is get_market_data_service()
        assert screening.options_data is get_options_data_service()

    def test_reset_services(self):
        market_data = get_market_data_service()

        reset_services()

        assert get_market_data_service() is not market_data
