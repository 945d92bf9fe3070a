"""Pytest configuration and shared dataset fixtures.

No sys.path hacks - tests import from the installed migraflow package.
"""

from pathlib import Path

import pytest


TIDY_CSV = """\
period,source_id,source_label,destination_id,destination_label,estimate,moe
2021,CA,California,TX,Texas,"12,500",500
2021,TX,Texas,CA,California,8000,
2021,NY,New York,NY,New York,100,10
2021,,Florida,,Georgia,0,5
2021,WA,Washington,OR,,300,
"""

# Census wide layout: title row, destination header row (names at columns
# 7, 9, 11, ...), sub-header row, then one row per source state with
# estimate/MOE pairs starting at column 9.
LEGACY_CSV = """\
State-to-State Migration Flows: 2021,,,,,,,,,,,,,,
Current residence in,Total population,,Same house,,Same state,,Alabama,,Alaska,,Arizona,,Total,
,Estimate,MOE,Estimate,MOE,Estimate,MOE,Estimate,MOE,Estimate,MOE,Estimate,MOE,Estimate,MOE
Alabama,"4,997,675","+/-1,234",1,2,3,4,5,6,,,"1,234",+/-56,N/A,
Alaska,"729,812","+/-321",1,2,3,4,5,6,500,+/- 0,,,0,
Arizona,"7,079,203","+/-999",1,2,3,4,5,6,"2,000",+/-150,75,+/-5,,
Puerto Rico,"3,263,584","+/-1",1,2,3,4,5,6,40,+/-4,50,+/-5,,,
United States,"1","+/-1",1,2,3,4,5,6,40,+/-4,50,+/-5,60,+/-6
,,,,,,,,,,,,,,
"""

GEXF_13 = """\
<?xml version="1.0" encoding="UTF-8"?>
<gexf xmlns="http://gexf.net/1.3" version="1.3">
  <graph mode="dynamic" defaultedgetype="directed" timeformat="integer">
    <attributes class="node">
      <attribute id="0" title="region" type="string"/>
      <attribute id="1" title="population" type="integer"/>
      <attribute id="2" title="coastal" type="boolean"/>
      <attribute id="3" title="broken"/>
    </attributes>
    <attributes class="edge">
      <attribute id="0" title="migration_type" type="string"/>
      <attribute id="1" title="economic_factor" type="double"/>
    </attributes>
    <nodes>
      <node id="NYC" label="New York City">
        <attvalues>
          <attvalue for="0" value="Northeast"/>
          <attvalue for="1" value="8336817"/>
          <attvalue for="2" value="TRUE"/>
          <attvalue for="3" value="ignored"/>
        </attvalues>
        <spells><spell start="2020" end="2022"/></spells>
      </node>
      <node id="LA" label="Los Angeles">
        <attvalues>
          <attvalue for="0" value="West"/>
          <attvalue for="1" value="unknown"/>
        </attvalues>
        <spells><spell start="2020" end="2022"/></spells>
      </node>
      <node id="CHI">
        <spells><spell start="2021" end="2022"/></spells>
      </node>
      <node label="No id"/>
    </nodes>
    <edges>
      <edge id="flow-0" source="NYC" target="LA" weight="12500">
        <attvalues>
          <attvalue for="0" value="economic"/>
          <attvalue for="1" value="0.15"/>
          <attvalue for="9" value="x"/>
        </attvalues>
        <spells><spell start="2020" end="2020"/></spells>
      </edge>
      <edge source="LA" target="NYC" weight="oops">
        <spells><spell start="2020-01-01" end="2021"/></spells>
      </edge>
      <edge id="flow-2" source="CHI" target="NYC" weight="15200">
        <spells><spell start="2020" end="2022"/></spells>
      </edge>
      <edge id="flow-3" target="NYC" weight="1"/>
    </edges>
  </graph>
</gexf>
"""


def pytest_addoption(parser):
    """Add gated perf test option."""
    parser.addoption(
        "--run-perf",
        action="store_true",
        default=False,
        help="Run performance sentinel benchmarks (gated)."
    )


def pytest_collection_modifyitems(config, items):
    """Skip perf-marked tests unless --run-perf is set."""
    if config.getoption("--run-perf"):
        return
    skip_perf = pytest.mark.skip(reason="perf tests gated; pass --run-perf")
    for item in items:
        if "perf" in item.keywords:
            item.add_marker(skip_perf)


@pytest.fixture
def tidy_csv() -> str:
    return TIDY_CSV


@pytest.fixture
def legacy_csv() -> str:
    return LEGACY_CSV


@pytest.fixture
def gexf_text() -> str:
    return GEXF_13


@pytest.fixture
def write_dataset(tmp_path: Path):
    """Write text to a file under tmp_path and return its path."""
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
