import pytest

from foodshare_dispatch.models.domain import Coordinate
from foodshare_dispatch.services.geospatial import distance_km, haversine_km

ONE_DEGREE_AT_EQUATOR_KM = 111.19492664


def test_distance_to_self_is_zero():
    point = Coordinate(-1.2921, 36.8219)
    assert distance_km(point, point) == 0.0


def test_distance_is_symmetric():
    nairobi = Coordinate(-1.2921, 36.8219)
    mombasa = Coordinate(-4.0435, 39.6682)
    assert distance_km(nairobi, mombasa) == pytest.approx(distance_km(mombasa, nairobi))


def test_one_degree_along_equator():
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(ONE_DEGREE_AT_EQUATOR_KM, rel=1e-6)


def test_zero_components_are_valid_coordinates():
    assert distance_km(Coordinate(0.0, 0.0), Coordinate(0.0, 2.0)) == pytest.approx(2 * ONE_DEGREE_AT_EQUATOR_KM, rel=1e-6)


def test_unknown_coordinate_is_rejected():
    with pytest.raises(ValueError):
        distance_km(Coordinate(0.0, 0.0), Coordinate(latitude=1.0))
