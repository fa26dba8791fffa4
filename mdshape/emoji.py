"""Emoji shortcode substitution (``:smile:`` -> 😄) for plain text runs."""

import re

SHORTCODE_RE = re.compile(r":([a-z0-9_+\-]+):")

EMOJI_SHORTCODES: dict[str, str] = {
    "smile": "\U0001f604",
    "smiley": "\U0001f603",
    "grinning": "\U0001f600",
    "grin": "\U0001f601",
    "laughing": "\U0001f606",
    "joy": "\U0001f602",
    "rofl": "\U0001f923",
    "wink": "\U0001f609",
    "blush": "\U0001f60a",
    "innocent": "\U0001f607",
    "heart_eyes": "\U0001f60d",
    "kissing_heart": "\U0001f618",
    "yum": "\U0001f60b",
    "stuck_out_tongue": "\U0001f61b",
    "sunglasses": "\U0001f60e",
    "nerd_face": "\U0001f913",
    "thinking": "\U0001f914",
    "neutral_face": "\U0001f610",
    "expressionless": "\U0001f611",
    "unamused": "\U0001f612",
    "roll_eyes": "\U0001f644",
    "grimacing": "\U0001f62c",
    "relieved": "\U0001f60c",
    "pensive": "\U0001f614",
    "sleepy": "\U0001f62a",
    "sleeping": "\U0001f634",
    "confused": "\U0001f615",
    "worried": "\U0001f61f",
    "cry": "\U0001f622",
    "sob": "\U0001f62d",
    "scream": "\U0001f631",
    "angry": "\U0001f620",
    "rage": "\U0001f621",
    "skull": "\U0001f480",
    "poop": "\U0001f4a9",
    "clown_face": "\U0001f921",
    "ghost": "\U0001f47b",
    "alien": "\U0001f47d",
    "robot": "\U0001f916",
    "wave": "\U0001f44b",
    "ok_hand": "\U0001f44c",
    "+1": "\U0001f44d",
    "thumbsup": "\U0001f44d",
    "-1": "\U0001f44e",
    "thumbsdown": "\U0001f44e",
    "clap": "\U0001f44f",
    "raised_hands": "\U0001f64c",
    "pray": "\U0001f64f",
    "muscle": "\U0001f4aa",
    "point_right": "\U0001f449",
    "point_left": "\U0001f448",
    "eyes": "\U0001f440",
    "brain": "\U0001f9e0",
    "heart": "❤️",
    "broken_heart": "\U0001f494",
    "sparkles": "✨",
    "star": "⭐",
    "star2": "\U0001f31f",
    "fire": "\U0001f525",
    "boom": "\U0001f4a5",
    "zap": "⚡",
    "sunny": "☀️",
    "cloud": "☁️",
    "umbrella": "☔",
    "snowflake": "❄️",
    "rainbow": "\U0001f308",
    "earth_americas": "\U0001f30e",
    "rocket": "\U0001f680",
    "airplane": "✈️",
    "car": "\U0001f697",
    "bike": "\U0001f6b2",
    "tada": "\U0001f389",
    "gift": "\U0001f381",
    "trophy": "\U0001f3c6",
    "medal_sports": "\U0001f3c5",
    "coffee": "☕",
    "beer": "\U0001f37a",
    "pizza": "\U0001f355",
    "cake": "\U0001f370",
    "apple": "\U0001f34e",
    "dog": "\U0001f436",
    "cat": "\U0001f431",
    "bug": "\U0001f41b",
    "snake": "\U0001f40d",
    "penguin": "\U0001f427",
    "unicorn": "\U0001f984",
    "book": "\U0001f4d6",
    "books": "\U0001f4da",
    "memo": "\U0001f4dd",
    "pencil2": "✏️",
    "bulb": "\U0001f4a1",
    "wrench": "\U0001f527",
    "hammer": "\U0001f528",
    "gear": "⚙️",
    "lock": "\U0001f512",
    "unlock": "\U0001f513",
    "key": "\U0001f511",
    "link": "\U0001f517",
    "mag": "\U0001f50d",
    "package": "\U0001f4e6",
    "computer": "\U0001f4bb",
    "phone": "☎️",
    "email": "\U0001f4e7",
    "calendar": "\U0001f4c6",
    "chart_with_upwards_trend": "\U0001f4c8",
    "hourglass": "⌛",
    "alarm_clock": "⏰",
    "bell": "\U0001f514",
    "warning": "⚠️",
    "no_entry": "⛔",
    "x": "❌",
    "white_check_mark": "✅",
    "heavy_check_mark": "✔️",
    "question": "❓",
    "exclamation": "❗",
    "100": "\U0001f4af",
    "construction": "\U0001f6a7",
    "recycle": "♻️",
    "arrow_right": "➡️",
    "arrow_left": "⬅️",
    "arrow_up": "⬆️",
    "arrow_down": "⬇️",
}


def replace_shortcodes(text: str) -> str:
    """Replace known shortcodes; unknown ones stay verbatim."""
    if ":" not in text:
        return text
    return SHORTCODE_RE.sub(lambda m: EMOJI_SHORTCODES.get(m.group(1), m.group(0)), text)
