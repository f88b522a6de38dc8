from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WordPack:
    key: str
    name: str
    icon: str
    words: tuple[str, ...]


def _pack(key: str, name: str, icon: str, words: str) -> WordPack:
    return WordPack(key=key, name=name, icon=icon, words=tuple(w.strip() for w in words.split(",")))


WORD_PACKS: dict[str, WordPack] = {
    p.key: p
    for p in (
        _pack(
            "animals", "Animals", "\U0001F981",
            "Lion,Eagle,Dolphin,Elephant,Tiger,Penguin,Giraffe,Wolf,"
            "Bear,Shark,Owl,Fox,Rabbit,Snake,Monkey,Whale",
        ),
        _pack(
            "food", "Food", "\U0001F355",
            "Pizza,Sushi,Burger,Pasta,Tacos,Steak,Salad,Ramen,"
            "Curry,Sandwich,Soup,Ice Cream,Pancakes,Fries,Chicken,Rice",
        ),
        _pack(
            "sports", "Sports", "⚽",
            "Soccer,Basketball,Tennis,Swimming,Golf,Boxing,Skiing,Rugby,"
            "Baseball,Hockey,Volleyball,Cycling,Surfing,Wrestling,Archery,Fencing",
        ),
        _pack(
            "movies", "Movies", "\U0001F3AC",
            "Titanic,Avatar,Inception,Frozen,Joker,Matrix,Gladiator,Shrek,"
            "Jaws,Rocky,Alien,Psycho,Bambi,Grease,Minions,Up",
        ),
        _pack(
            "countries", "Countries", "\U0001F30D",
            "Japan,France,Brazil,Egypt,Canada,Italy,Mexico,India,"
            "Greece,Sweden,Kenya,Spain,Turkey,Peru,China,Norway",
        ),
        _pack(
            "jobs", "Jobs", "\U0001F454",
            "Doctor,Teacher,Chef,Pilot,Artist,Lawyer,Farmer,Actor,"
            "Nurse,Police,Firefighter,Engineer,Writer,Dentist,Astronaut,DJ",
        ),
        _pack(
            "places", "Places", "\U0001F3DB️",
            "Beach,Museum,Airport,Hospital,Library,Stadium,Casino,Zoo,"
            "Church,School,Prison,Farm,Theater,Gym,Mall,Restaurant",
        ),
        _pack(
            "objects", "Objects", "\U0001F4E6",
            "Phone,Mirror,Clock,Lamp,Chair,Umbrella,Camera,Piano,"
            "Bicycle,Telescope,Hammer,Candle,Book,Wallet,Glasses,Key",
        ),
        _pack(
            "emotions", "Emotions", "\U0001F60A",
            "Happy,Sad,Angry,Scared,Excited,Confused,Proud,Jealous,"
            "Nervous,Relaxed,Bored,Surprised,Tired,Hopeful,Grateful,Anxious",
        ),
    )
}


def get_pack(topic: str | None) -> WordPack | None:
    if not isinstance(topic, str):
        return None
    return WORD_PACKS.get(topic.strip().lower())


def list_topics() -> list[dict]:
    return [
        {"key": p.key, "name": p.name, "icon": p.icon, "words": list(p.words)}
        for p in WORD_PACKS.values()
    ]
