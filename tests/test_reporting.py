from __future__ import annotations

import json

import pandas as pd
import pytest

from schedview.schedule.reporting import (
    GANTT_COLUMNS,
    STATION_TIMELINE_COLUMNS,
    TASK_COLUMNS,
    TEAM_WORKLOAD_COLUMNS,
    commit_codes_record,
    gantt_dataframe,
    order_tree_records,
    station_timeline_dataframe,
    statistics_record,
    task_dataframe,
    team_workload_dataframe,
)


@pytest.mark.parametrize(
    "builder, columns",
    [
        (gantt_dataframe, GANTT_COLUMNS),
        (task_dataframe, TASK_COLUMNS),
        (station_timeline_dataframe, STATION_TIMELINE_COLUMNS),
        (team_workload_dataframe, TEAM_WORKLOAD_COLUMNS),
    ],
)
def test_empty_inputs_keep_columns(builder, columns):
    frame = builder([])
    assert frame.empty
    assert list(frame.columns) == columns


def test_gantt_dataframe(adapter):
    frame = gantt_dataframe(adapter.split_gantt_items("order"))
    assert list(frame.columns) == GANTT_COLUMNS
    assert len(frame) == 7
    assert frame["id"].tolist()[:3] == ["T1_seg_0", "T2_seg_0", "T2_seg_1"]
    assert frame.loc[1, "machine_code"] == "MC-5AX"
    assert set(frame["group"]) == {"Rocket A", "Rocket B"}


def test_task_dataframe_uses_snake_case_columns(adapter):
    frame = task_dataframe(adapter.filter_tasks(station_codes=["ST-02"]))
    assert list(frame.columns) == TASK_COLUMNS
    assert frame["task_id"].tolist() == ["T1", "T4"]
    assert frame["station_name"].tolist() == ["Assembly", "Assembly"]
    assert frame["planstart"].tolist() == ["2024-01-01T08:00:00", "2024-01-02T09:00:00"]


def test_station_timeline_dataframe(adapter):
    frame = station_timeline_dataframe(adapter.station_timeline())
    assert frame["station_code"].tolist() == ["ST-01", "ST-02"]
    assert frame["task_count"].tolist() == [3, 2]
    assert frame["worked_hours"].tolist() == pytest.approx([20.0, 6.0])
    assert frame["utilization"].tolist() == [83, 25]
    assert frame["first_start"].tolist() == ["2024-01-01T14:00:00", "2024-01-01T08:00:00"]
    assert frame["last_end"].tolist() == ["2024-01-04T12:00:00", "2024-01-02T11:00:00"]


def test_station_timeline_dataframe_idle_station(adapter):
    frame = station_timeline_dataframe(adapter.station_timeline(all_stations=[("ST-99", "Idle")]))
    idle = frame[frame["station_code"] == "ST-99"].iloc[0]
    assert idle["task_count"] == 0
    assert idle["utilization"] == 0
    assert pd.isna(idle["first_start"])


def test_team_workload_dataframe(adapter):
    frame = team_workload_dataframe(adapter.team_workload())
    assert frame.to_dict(orient="records") == [
        {
            "team_code": "TM-A",
            "team_name": "Alpha",
            "task_count": 3,
            "total_hours": 20,
            "first_start": "2024-01-01T14:00:00",
            "last_end": "2024-01-04T12:00:00",
        },
        {
            "team_code": "TM-B",
            "team_name": "Bravo",
            "task_count": 2,
            "total_hours": 6,
            "first_start": "2024-01-01T08:00:00",
            "last_end": "2024-01-02T11:00:00",
        },
    ]


def test_statistics_record(adapter):
    record = statistics_record(adapter.statistics())
    assert record == {
        "total_orders": 2,
        "total_tasks": 5,
        "total_teams": 2,
        "total_stations": 2,
        "date_range": {"start": "2024-01-01", "end": "2024-01-04", "days": 3},
    }


def test_order_tree_records_are_json_ready(adapter):
    records = order_tree_records(adapter.to_order_tree())
    assert [record["key"] for record in records] == ["ORD-2", "ORD-1"]
    first = records[0]
    assert first["product_sequence"] == ["P-20"]
    assert first["children"] == [
        {
            "key": "ORD-2/P-20",
            "product_code": "P-20",
            "product_name": "Fairing",
            "task_ids": ["T5", "T4"],
        }
    ]
    assert first["tasks"][0]["task id"] == "T5"
    assert first["tasks"][0]["station code"] == "ST-01"
    json.dumps(records)


def test_commit_codes_record(adapter):
    assert commit_codes_record(adapter.commit_codes()) == {
        "order_codes": ["ORD-1", "ORD-2"],
        "task_codes": ["TC-ASM", "TC-MIL", "TC-DRL"],
    }
