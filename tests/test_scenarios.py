from fxrisk.scenarios import (
    DEFAULT_BUCKETS,
    PRESET_MOVES_PCT,
    bucket_impact,
    impact_score,
    make_bucket,
    move_pct_between,
    preset_scenarios,
    scenario_peso_impact,
    shocked_rate,
)


def test_bucket_delta_follows_exposed_pesos():
    b = make_bucket("travel", "Travel", 60000, 0.85)
    up = bucket_impact(b, 1.0)
    assert abs(up.exposure_peso - 51000.0) < 1e-9
    assert abs(up.delta - 510.0) < 1e-9
    assert abs(up.new_amount - 60510.0) < 1e-9

    down = bucket_impact(b, -3.0)
    assert abs(down.delta + 1530.0) < 1e-9


def test_default_basket_total_at_plus_one_pct():
    res, detail = scenario_peso_impact(1.0)
    # 4000*0.25 + 60000*0.85 + 25000*0.12 + 5000*0.7 = 58500 exposed pesos
    assert abs(res.total_delta - 585.0) < 1e-9
    assert len(detail) == len(DEFAULT_BUCKETS)
    assert abs(detail["delta"].sum() - res.total_delta) < 1e-9
    assert res.shocked_rate is None
    assert "USD gets stronger" in res.shock_description


def test_impact_score_scales_and_clips():
    # mean exposure of the defaults is 0.48
    assert abs(impact_score(DEFAULT_BUCKETS, 1.0) - 5.76) < 1e-9
    assert impact_score(DEFAULT_BUCKETS, -3.0) == impact_score(DEFAULT_BUCKETS, 3.0)
    full = [make_bucket("x", "X", 1000, 1.0)]
    assert impact_score(full, 20.0) == 100.0
    assert impact_score([], 3.0) == 0.0


def test_bucket_inputs_are_clipped():
    b = make_bucket("x", "X", 5_000_000.4, 1.7)
    assert b.amount == 2_000_000
    assert b.exposure == 1.0
    b = make_bucket("y", "Y", -10, -0.2)
    assert b.amount == 0
    assert b.exposure == 0.0


def test_shocked_rate_and_simple_move_agree():
    spot = 58.0
    target = shocked_rate(spot, 3.0)
    assert abs(target - 59.74) < 1e-9
    assert abs(move_pct_between(spot, target) - 3.0) < 1e-9
    assert move_pct_between(0.0, 58.0) is None


def test_preset_moves_are_symmetric():
    table = preset_scenarios(latest_rate=58.0)
    assert list(table["move_pct"]) == list(PRESET_MOVES_PCT)
    by_move = dict(zip(table["move_pct"], table["total_delta"]))
    assert abs(by_move[3.0] + by_move[-3.0]) < 1e-9
    assert by_move[-1.0] < 0 < by_move[1.0]
    assert abs(table.loc[table["move_pct"] == -1.0, "shocked_rate"].iloc[0] - 57.42) < 1e-9
