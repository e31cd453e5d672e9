"""Shared test fixtures for shape2flat net tests."""
import pytest
from pathdata.measure import get_measurer
from pathdata.segments import classify_edges
from net.layout import build_net
from net.generate import generate_net


RECT_D = "M 0,0 L 100,0 L 100,50 L 0,50 Z"
RECT_POLY = [(0.0, 0.0), (100.0, 0.0), (100.0, 50.0), (0.0, 50.0)]
# Straight bottom and sides, semicircular top
ARCH_D = "M 0,60 L 0,20 A 20,20 0 0 1 40,20 L 40,60 Z"
CIRCLE_SVG = '<svg xmlns="http://www.w3.org/2000/svg"><circle cx="50" cy="50" r="20"/></svg>'
# Flat chord drawn right to left, dome above it
DOME_D = "M 100,0 L 0,0 A 50 50 0 0 1 100,0 Z"


@pytest.fixture(scope="session")
def measurer():
    """Default svgpathtools backend."""
    return get_measurer()


@pytest.fixture(scope="session")
def quad_measurer():
    return get_measurer("quadrature")


@pytest.fixture(scope="session")
def rect_layout():
    """NetLayout of the 100x50 rectangle at depth 30."""
    return build_net(RECT_POLY, 30)


@pytest.fixture(scope="session")
def rect_edges(measurer):
    return classify_edges(RECT_D, measurer)


@pytest.fixture(scope="session")
def rect_result():
    """generate_net result for the 100x50 rectangle at depth 30."""
    return generate_net(path_data=RECT_D, depth=30)


@pytest.fixture(scope="session")
def arch_result():
    return generate_net(path_data=ARCH_D, depth=20)


@pytest.fixture(scope="session")
def circle_result():
    return generate_net(svg_content=CIRCLE_SVG, depth=20)


@pytest.fixture(scope="session")
def dome_result():
    """Mixed outline whose reference edge points left."""
    return generate_net(path_data=DOME_D, depth=20)


def group(svg_text: str, gid: str) -> str:
    """Body of <g id="gid"> in serialized output."""
    start = svg_text.index(f'<g id="{gid}">')
    end = svg_text.index("</g>", start)
    return svg_text[start:end]
