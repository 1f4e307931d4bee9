from __future__ import annotations

from backend.app.services.media import first_media_file_name, media_type, sort_output_file_names


def test_media_type_guesses_by_extension():
    assert media_type("clip.mp4") == "video"
    assert media_type("song.mp3") == "audio"
    assert media_type("thumb.jpg") == "image"
    assert media_type("no-extension") == "application"


def test_sort_output_file_names_groups_media_first():
    names = ["b.jpg", "info.json", "z.mp4", "a.mp3", "a.mp4", "notes.txt", "a.png"]
    assert sort_output_file_names(names) == [
        "a.mp4",
        "z.mp4",
        "a.mp3",
        "a.png",
        "b.jpg",
        "info.json",
        "notes.txt",
    ]


def test_first_media_file_name_is_alphabetical_audio_or_video():
    assert first_media_file_name(["thumb.jpg", "z.mp4", "b.mp3"]) == "b.mp3"
    assert first_media_file_name(["thumb.jpg", "info.json"]) is None
    assert first_media_file_name([]) is None
