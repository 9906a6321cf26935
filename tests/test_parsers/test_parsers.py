"""Tests for tool output parsers with realistic samples."""

from __future__ import annotations

import pytest

from nodewatch.parsers.process import match_processes, parse_ps
from nodewatch.parsers.ring import count_by_status, parse_member_status
from nodewatch.parsers.stats import get_metric, parse_stats, ring_members
from nodewatch.parsers.top import latest_frame, parse_etop


# ── Process table ────────────────────────────────────────────────────

PS_OUTPUT = """\
    1   11840 /sbin/init
  812    6120 /usr/sbin/sshd -D
 2201   18244 /usr/lib/riak/erts-5.10.3/bin/epmd -daemon
 2245 2097152 /usr/lib/riak/erts-5.10.3/bin/beam.smp -scl false -sfwi 500 -P 256000 -- -root /usr/lib/riak -progname riak -- -home /var/lib/riak -- -boot /usr/lib/riak/releases/2.2.3/riak -name riak@10.0.0.1 -setcookie riak -- console
 3310  524288 /usr/lib/riak/erts-5.10.3/bin/beam.smp -- -root /usr/lib/riak -sname riak_repl -- console
 4021    3012 ps -eo pid=,rss=,args=
"""


def test_parse_ps():
    entries = parse_ps(PS_OUTPUT)
    assert len(entries) == 6
    assert entries[0].pid == 1
    assert entries[3].rss_kb == 2097152
    assert entries[3].rss_mb == 2048.0
    assert entries[3].node_name == "riak@10.0.0.1"
    assert entries[4].node_name == "riak_repl"
    assert entries[0].node_name == ""


def test_parse_ps_ignores_garbage():
    assert parse_ps("PID RSS COMMAND\n\n") == []


def test_match_processes_by_pattern():
    matched = match_processes(parse_ps(PS_OUTPUT), "beam.smp")
    assert [e.pid for e in matched] == [2245, 3310]


def test_match_processes_by_node():
    matched = match_processes(parse_ps(PS_OUTPUT), "beam.smp", "riak@10.0.0.1")
    assert [e.pid for e in matched] == [2245]


def test_match_processes_short_name():
    matched = match_processes(parse_ps(PS_OUTPUT), "beam.smp", "riak_repl@host")
    assert [e.pid for e in matched] == [3310]


def test_match_processes_none():
    assert match_processes(parse_ps(PS_OUTPUT), "beam.smp", "riak@10.9.9.9") == []


# ── Ring membership ──────────────────────────────────────────────────

MEMBER_STATUS_OUTPUT = """\
================================= Membership ==================================
Status     Ring    Pending    Node
-------------------------------------------------------------------------------
valid      34.4%      --      'riak@10.0.0.1'
valid      32.8%      --      'riak@10.0.0.2'
leaving    32.8%     0.0%     'riak@10.0.0.3'
joining     0.0%      --      'riak@10.0.0.4'
down        0.0%      --      'riak@10.0.0.5'
-------------------------------------------------------------------------------
Valid:2 / Leaving:1 / Exiting:0 / Joining:1 / Down:1
"""


def test_parse_member_status():
    members = parse_member_status(MEMBER_STATUS_OUTPUT)
    assert len(members) == 5
    assert members[0].node == "riak@10.0.0.1"
    assert members[0].status == "valid"
    assert members[0].ring_pct == 34.4
    assert members[0].pending_pct is None
    assert members[2].pending_pct == 0.0


def test_count_by_status():
    counts = count_by_status(parse_member_status(MEMBER_STATUS_OUTPUT))
    assert counts == {"valid": 2, "leaving": 1, "exiting": 0, "joining": 1, "down": 1}


def test_parse_member_status_skips_summary_line():
    members = parse_member_status("Valid:2 / Leaving:1 / Exiting:0 / Joining:1 / Down:1\n")
    assert members == []


# ── Stats ────────────────────────────────────────────────────────────

STATS_BODY = """\
{"vnode_gets": 1204, "vnode_puts": 530, "node_gets": 401,
 "node_get_fsm_time_95": 3120, "node_put_fsm_time_95": "4410",
 "nodename": "riak@10.0.0.1", "ring_members": ["riak@10.0.0.1", "riak@10.0.0.2"],
 "storage_backend": "riak_kv_eleveldb_backend", "riak_search_enabled": false}
"""


def test_parse_stats_and_get_metric():
    stats = parse_stats(STATS_BODY)
    assert get_metric(stats, "node_gets") == 401.0
    assert get_metric(stats, "node_put_fsm_time_95") == 4410.0
    assert get_metric(stats, "storage_backend") is None
    assert get_metric(stats, "riak_search_enabled") is None
    assert get_metric(stats, "missing") is None
    assert ring_members(stats) == ["riak@10.0.0.1", "riak@10.0.0.2"]


@pytest.mark.parametrize("body", ["not json", "[1, 2, 3]"])
def test_parse_stats_rejects_bad_documents(body):
    with pytest.raises(ValueError):
        parse_stats(body)


# ── etop ─────────────────────────────────────────────────────────────

ETOP_OUTPUT = """\
========================================================================================
 'riak@10.0.0.1'                                                           14:22:01
 Load:  cpu         3               Memory:  total      334342    binary      21124
        procs    1320                        processes   95210    code        18541
        runq        2                        atom          920    ets         11105

Pid            Name or Initial Func    Time    Reds  Memory    MsgQ Current Function
----------------------------------------------------------------------------------------
<6052.1019.0>  riak_kv_vnode           '-'   920331  143080    2400 riak_kv_vnode:handle/3
<6052.1044.0>  riak_core_vnode_master  '-'   420112   26552      12 gen_server:loop/6
<6052.0.0>     init                    '-'     2858   26552       0 init:loop/1
========================================================================================

========================================================================================
 'riak@10.0.0.1'                                                           14:22:02
 Load:  cpu         1               Memory:  total      334500    binary      21130
        procs    1321                        processes   95300    code        18541
        runq        0                        atom          920    ets         11105

Pid            Name or Initial Func    Time    Reds  Memory    MsgQ Current Function
----------------------------------------------------------------------------------------
<6052.1019.0>  riak_kv_vnode           '-'   120331  143080      15 riak_kv_vnode:handle/3
<6052.0.0>     init                    '-'     2858   26552       0 init:loop/1
========================================================================================
"""


def test_parse_etop_frames():
    frames = parse_etop(ETOP_OUTPUT)
    assert len(frames) == 2
    first = frames[0]
    assert first.node == "riak@10.0.0.1"
    assert first.procs == 1320
    assert first.runq == 2
    assert first.memory_total == 334342
    assert len(first.processes) == 3
    assert first.max_msg_q == 2400
    assert first.busiest.name == "riak_kv_vnode"
    assert first.processes[0].time is None
    assert first.processes[0].current_function == "riak_kv_vnode:handle/3"


def test_latest_frame_uses_last_complete_frame():
    frame = latest_frame(ETOP_OUTPUT)
    assert frame is not None
    assert frame.max_msg_q == 15
    assert frame.runq == 0


def test_latest_frame_partial_output():
    # Cut off before the first frame's rows arrived
    partial = ETOP_OUTPUT.split("Pid ")[0]
    assert latest_frame(partial) is None
    assert latest_frame("") is None
