import sys
from pathlib import Path as _P

import pandas as pd
import pytest

# Ensure project root (containing the 'qdata_clean' package directory) is on sys.path
_project_root = _P(__file__).resolve().parents[2]
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from qdata_clean import parse  # noqa: E402


@pytest.fixture
def qubit_csv():
    """Small experiment export with a blank row and a missing fidelity."""
    return (
        "run,qubits,fidelity,backend\n"
        "1,5,0.91,ibm_lagos\n"
        "2,7,0.88,ionq_aria\n"
        ",,,\n"
        "3,5,,rigetti_aspen\n"
        "4,12,0.95,ibm_lagos\n"
    )


@pytest.fixture
def qubit_table(qubit_csv) -> pd.DataFrame:
    return parse("runs.csv", qubit_csv)
