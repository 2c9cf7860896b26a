"""
API integration tests for the v1 token core endpoints.

Tests the HTTP layer:
- Health and metrics endpoints
- Token generation, harmony and contrast endpoints
- Mood board, cluster and regeneration endpoints
- Project merge and .soc export
- Parameter validation and error mapping
"""

import pytest


def test_health_check(test_client):
    """Test health endpoint."""
    response = test_client.get("/healthz")

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["version"] == "1.0.0"
    assert data["service"] == "apocapalette-token-core"


def test_metrics_count_requests(test_client):
    """Test that served requests show up in /metrics."""
    test_client.post("/v1/harmony", json={"base": 30, "mode": "triadic"})

    response = test_client.get("/metrics")
    assert response.status_code == 200
    data = response.json()
    assert data["counters"]["requests_total_harmony"] == 1
    assert data["timing_stats"]["harmony_duration_ms"]["count"] == 1


class TestTokensAPI:
    """Test the /v1/tokens endpoint"""

    def test_generate_tokens(self, test_client):
        response = test_client.post("/v1/tokens", json={
            "baseColor": "#3366ff",
            "mode": "Complementary",
            "themeMode": "light",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["parameters"]["baseColor"] == "#3366ff"
        assert data["parameters"]["isDark"] is False
        assert data["tokens"]["brand"]["primary"]["type"] == "color"
        assert data["swatches"][0]["name"] == "Primary"

    def test_defaults(self, test_client):
        response = test_client.post("/v1/tokens", json={})

        assert response.status_code == 200
        assert response.json()["parameters"]["baseColor"] == "#6366f1"

    def test_print_mode(self, test_client):
        response = test_client.post("/v1/tokens", json={"baseColor": "#3366ff", "printMode": True})

        assert response.status_code == 200
        assert "print" in response.json()["tokens"]

    def test_invalid_base_color(self, test_client):
        response = test_client.post("/v1/tokens", json={"baseColor": "3366ff"})
        assert response.status_code == 422

    def test_invalid_theme_mode(self, test_client):
        response = test_client.post("/v1/tokens", json={"themeMode": "sepia"})
        assert response.status_code == 422

    def test_invalid_slider(self, test_client):
        response = test_client.post("/v1/tokens", json={"apocalypseIntensity": 500})
        assert response.status_code == 422


class TestColorAPI:
    """Test the harmony and contrast endpoints"""

    def test_harmony_from_hue(self, test_client):
        response = test_client.post("/v1/harmony", json={"base": 0, "mode": "triadic"})

        assert response.status_code == 200
        assert response.json()["hues"] == [0, 120, 240]

    def test_harmony_reverse(self, test_client):
        response = test_client.post("/v1/harmony", json={"base": 0, "mode": "square", "reverse": True})
        assert response.json()["hues"] == [270, 180, 90, 0]

    def test_harmony_malformed_color(self, test_client):
        response = test_client.post("/v1/harmony", json={"base": "not-a-color"})

        assert response.status_code == 422
        counters = test_client.get("/metrics").json()["counters"]
        assert counters["failed_total_invalid_color"] == 1

    def test_contrast_ensure(self, test_client):
        response = test_client.post("/v1/contrast/ensure", json={"fg": "#999999", "bg": "#ffffff", "target": 4.5})

        assert response.status_code == 200
        data = response.json()
        assert data["ratio"] >= 4.5
        assert data["level"] in ("AA", "AAA")
        assert data["converged"] is True
        assert data["fallback_used"] is False
        assert "contrast_fallback_total" not in test_client.get("/metrics").json()["counters"]

    def test_contrast_fallback_counted(self, test_client):
        response = test_client.post("/v1/contrast/ensure", json={"fg": "#808080", "bg": "#777777", "target": 21})

        assert response.status_code == 200
        assert response.json()["fallback_used"] is True
        counters = test_client.get("/metrics").json()["counters"]
        assert counters["contrast_fallback_total"] == 1
        assert counters["requests_total_contrast_ensure"] == 1

    def test_contrast_ensure_malformed(self, test_client):
        response = test_client.post("/v1/contrast/ensure", json={"fg": "#12", "bg": "#ffffff"})
        assert response.status_code == 422

    def test_contrast_target_out_of_range(self, test_client):
        response = test_client.post("/v1/contrast/ensure", json={"fg": "#000", "bg": "#fff", "target": 30})
        assert response.status_code == 422

    def test_auto_tune(self, test_client):
        response = test_client.post("/v1/contrast/auto-tune", json={"fg": "#777777", "bg": "#888888", "target": 4.5})

        assert response.status_code == 200
        data = response.json()
        assert data["converged"] is True
        assert data["ratio"] >= 4.5


class TestMoodAPI:
    """Test the mood board endpoints"""

    def test_mood_board(self, test_client):
        response = test_client.post("/v1/mood-board", json={
            "base_hex": "#3366ff", "required_hex": "#ff6600", "seed": 7,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["seed"] == 7
        assert [item["cluster"]["type"] for item in data["clusters"]] == [
            "smoky", "bright", "deep", "warm-drift", "cool-drift",
        ]

    def test_mood_board_timing_recorded(self, test_client):
        clusters = test_client.post("/v1/mood-board", json={"base_hex": "#3366ff", "seed": 3}).json()["clusters"]
        relaxed = sum(
            slot.get("relaxed", False) for item in clusters for slot in item["cluster"]["slots"]
        )

        data = test_client.get("/metrics").json()
        assert data["timing_stats"]["mood_board_duration_ms"]["count"] == 1
        assert data["counters"].get("mood_relaxed_slots_total", 0) == relaxed

    def test_mood_board_deterministic(self, test_client):
        payload = {"base_hex": "#3366ff", "seed": 99, "include_cool": False}
        first = test_client.post("/v1/mood-board", json=payload).json()
        second = test_client.post("/v1/mood-board", json=payload).json()
        assert first == second
        assert len(first["clusters"]) == 4

    def test_mood_cluster(self, test_client):
        response = test_client.post("/v1/mood-clusters", json={
            "type": "deep", "base_hex": "#3366ff", "required_hex": "#ff6600", "seed": 5,
        })

        assert response.status_code == 200
        cluster = response.json()["cluster"]
        assert len(cluster["slots"]) == 10
        assert cluster["slots"][0]["color"] == "#ff6600"

    def test_unknown_mood_type(self, test_client):
        response = test_client.post("/v1/mood-clusters", json={"type": "glittery", "seed": 1})

        assert response.status_code == 400
        counters = test_client.get("/metrics").json()["counters"]
        assert counters["failed_total_bad_request"] == 1

    def test_invalid_policy(self, test_client):
        response = test_client.post("/v1/mood-clusters", json={
            "type": "smoky", "policy": {"exhaustion_strategy": "shrug"},
        })
        assert response.status_code == 422

    def test_relaxed_policy_reported(self, test_client):
        response = test_client.post("/v1/mood-clusters", json={
            "type": "bright", "base_hex": "#3366ff", "required_hex": "#ff0000", "seed": 8,
            "policy": {"min_hue_distance": 120, "exhaustion_strategy": "accept"},
        })

        assert response.status_code == 200
        assert response.json()["constraints_satisfied"] is False
        relaxed = sum(slot.get("relaxed", False) for slot in response.json()["cluster"]["slots"])
        counters = test_client.get("/metrics").json()["counters"]
        assert relaxed >= 1
        assert counters["mood_relaxed_slots_total"] == relaxed

    def test_regenerate_with_locks_and_edits(self, test_client):
        created = test_client.post("/v1/mood-clusters", json={
            "type": "smoky", "base_hex": "#3366ff", "required_hex": "#ff6600", "seed": 11,
        }).json()["cluster"]
        anchor = next(slot for slot in created["slots"] if slot["id"] == "anchor-1")

        response = test_client.post("/v1/mood-clusters/regenerate", json={
            "cluster": created,
            "seed": 12,
            "locked_slots": ["anchor-1"],
            "edits": {"contrast": "#00FF00"},
        })

        assert response.status_code == 200
        cluster = response.json()["cluster"]
        slots = {slot["id"]: slot for slot in cluster["slots"]}
        assert cluster["seed"] == 12
        assert slots["anchor-1"]["color"] == anchor["color"]
        assert slots["contrast"]["color"] == "#00ff00"
        assert slots["contrast"]["locked"] is True

    def test_regenerate_bad_edit(self, test_client):
        created = test_client.post("/v1/mood-clusters", json={"type": "deep", "seed": 3}).json()["cluster"]

        response = test_client.post("/v1/mood-clusters/regenerate", json={
            "cluster": created, "edits": {"contrast": "green"},
        })
        assert response.status_code == 422

    def test_regenerate_unknown_slot(self, test_client):
        created = test_client.post("/v1/mood-clusters", json={"type": "deep", "seed": 3}).json()["cluster"]

        response = test_client.post("/v1/mood-clusters/regenerate", json={
            "cluster": created, "locked_slots": ["anchor-42"],
        })
        assert response.status_code == 400


class TestProjectAPI:
    """Test project merge and swatch export endpoints"""

    def test_merge(self, test_client, sample_project_data):
        response = test_client.post("/v1/projects/merge", json={"project": sample_project_data})

        assert response.status_code == 200
        data = response.json()
        assert data["project_name"] == "Seasons"
        assert data["count"] == 4
        assert [color["name"] for color in data["colors"]] == [
            "Spring / primary", "Spring / secondary", "Summer / Yellow", "Spring / Blue",
        ]

    def test_merge_overrides(self, test_client, sample_project_data):
        response = test_client.post("/v1/projects/merge", json={
            "project": sample_project_data, "overrides": {"maxColors": 1},
        })

        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_project_soc(self, test_client, sample_project_data):
        response = test_client.post("/v1/projects/soc", json={"project": sample_project_data})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert "X-Request-ID" in response.headers
        assert response.text.count("<draw:color ") == 4
        assert 'draw:name="Spring / Primary"' in response.text

    def test_palette_soc(self, test_client):
        response = test_client.post("/v1/palettes/soc", json={
            "colors": {"primaryColor": "#ff0000", "text_muted": "#334455", "broken": "nope"},
        })

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert 'draw:name="Primary Color"' in response.text
        assert 'draw:name="Text Muted"' in response.text
        assert "broken" not in response.text.lower()


class TestPresetAPI:
    """Test the random preset endpoint"""

    def test_seeded_preset(self, test_client):
        first = test_client.post("/v1/presets/random", json={"seed": 5}).json()
        second = test_client.post("/v1/presets/random", json={"seed": 5}).json()
        assert first == second
        assert first["baseColor"].startswith("#")

    @pytest.mark.parametrize("seed", [1, 2])
    def test_crank(self, test_client, seed):
        response = test_client.post("/v1/presets/random", json={"seed": seed, "crank": True})

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "Apocalypse"
        assert data["apocalypseIntensity"] == 150
