import re
import time

import pytest

from app.modules.media.keys import KEY_PATTERN, derive_media_key, extension_for, kind_for, media_key_prefix


def test_key_matches_template():
    key = derive_media_key("t1", "c1", "f1", "a1", "FRONT", "jpg")

    match = KEY_PATTERN.match(key)
    assert match is not None
    assert match.group("tenant_id") == "t1"
    assert match.group("company_id") == "c1"
    assert match.group("farm_id") == "f1"
    assert match.group("animal_id") == "a1"
    assert match.group("pose") == "front"
    assert match.group("extension") == "jpg"
    assert key.startswith("tenant/t1/company/c1/farm/f1/animal/a1/")


def test_key_has_exactly_one_timestamp_segment():
    key = derive_media_key("t1", "c1", "f1", "a1", "side", "mp4")
    filename = key.rsplit("/", 1)[1]
    assert len(re.findall(r"\d{13,}", key)) == 1
    assert re.fullmatch(r"\d+_side\.mp4", filename)


def test_timestamp_is_epoch_milliseconds():
    before = int(time.time() * 1000)
    key = derive_media_key("t1", "c1", "f1", "a1", "left", "jpg")
    after = int(time.time() * 1000)
    stamp = int(KEY_PATTERN.match(key).group("timestamp"))
    assert before <= stamp <= after


def test_keys_separated_in_time_differ():
    first = derive_media_key("t1", "c1", "f1", "a1", "front", "jpg")
    time.sleep(0.005)
    second = derive_media_key("t1", "c1", "f1", "a1", "front", "jpg")
    assert first != second
    assert first < second


def test_extension_is_normalised():
    key = derive_media_key("t1", "c1", "f1", "a1", "GAIT", ".MP4")
    assert key.endswith("_gait.mp4")


@pytest.mark.parametrize("bad", ["", "   ", None])
def test_empty_identifiers_are_rejected(bad):
    with pytest.raises(ValueError):
        derive_media_key("t1", bad, "f1", "a1", "front", "jpg")


def test_identifier_with_slash_is_rejected():
    with pytest.raises(ValueError, match="farm_id"):
        derive_media_key("t1", "c1", "f1/../f2", "a1", "front", "jpg")


def test_prefix_is_the_animal_namespace():
    prefix = media_key_prefix("t1", "c1", "f1", "a1")
    assert prefix == "tenant/t1/company/c1/farm/f1/animal/a1/"
    assert derive_media_key("t1", "c1", "f1", "a1", "right", "jpg").startswith(prefix)


def test_extension_and_kind_from_content_type():
    assert extension_for("video/mp4") == "mp4"
    assert extension_for("image/png") == "jpg"
    assert kind_for("video/quicktime") == "VIDEO"
    assert kind_for("image/jpeg") == "PHOTO"
