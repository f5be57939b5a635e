import pytest

from domain.models import SimulationConfig


@pytest.fixture
def generous_config():
    """Short lead times and a high reorder level: never starves without disruption."""
    return SimulationConfig(
        fab_capacity=1000,
        initial_inventory=6000,
        min_demand=150,
        max_demand=300,
        reorder_level=4000,
        reorder_quantity=1000,
        lead_time_fab=2,
        lead_time_assembly=1,
        lead_time_transport=1,
        disruption_prob=0.0,
        simulation_duration=120,
    )


@pytest.fixture
def reference_config():
    return SimulationConfig(
        fab_capacity=1000,
        initial_inventory=5000,
        min_demand=150,
        max_demand=300,
        reorder_level=2000,
        reorder_quantity=3000,
        lead_time_fab=10,
        lead_time_assembly=5,
        lead_time_transport=3,
        disruption_prob=0.0,
        simulation_duration=30,
    )
