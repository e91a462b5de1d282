from domain.services.lyrics_formatter import format_lyrics_content

def test_crammed_lrc_is_split_per_time_tag():
    crammed = "[ti:Title][00:00.00]intro[00:12.34]verse one[01:02.345]chorus"
    assert format_lyrics_content(crammed) == "[ti:Title][00:00.00]intro\n[00:12.34]verse one\n[01:02.345]chorus\n"

def test_text_with_line_breaks_is_untouched():
    text = "[00:01.00]a\r\n[00:02.00]b[00:03.00]c"
    assert format_lyrics_content(text) == text

def test_plain_text_is_untouched():
    assert format_lyrics_content("just some words") == "just some words"
    assert format_lyrics_content("[00:01.00]only one tag") == "[00:01.00]only one tag"
    assert format_lyrics_content("") == ""
