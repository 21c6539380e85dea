# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import pytest

from index_creator.logging.init import reset_logging

SAMPLE_MARKDOWN = """| term | sub-term | notes | book | page |
| --- | --- | --- | --- | --- |
| ?vuln^vulnerability | | | | |
| vuln | | here are some notes about vuln | 1 | 15 |
| nmap | scanning | | 2 | 40, 12 |
| ^^ | flags && options | | ^^ | 41 |
| recon<> | nmap | | 2 | 7 |
"""

SAMPLE_CSV = '''term,sub-term,notes,book,page
?meta: {"title": "Red Team", "collapsed": false, "hasDividers": true}
"?sqli^""SQL injection""",,,,
sqli,blind,"time based, boolean",3,"**88**, 5"
,union,,,
'''


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./output
exports: [json, csv]
log_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "indexer.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_markdown() -> str:
    return SAMPLE_MARKDOWN


@pytest.fixture()
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture()
def sample_index_files(temp_workdir: Path) -> list[Path]:
    files = []
    for name, text in [("red-team.csv", SAMPLE_CSV), ("tools.md", SAMPLE_MARKDOWN)]:
        f = temp_workdir / "data" / name
        f.write_text(text, encoding="utf-8")
        files.append(f)
    return files


@pytest.fixture()
def clean_logging():
    # Handlers bind sys.stdout at setup time; rebuild them under capsys
    reset_logging()
    yield
    reset_logging()
