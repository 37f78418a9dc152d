# File: profiles.py
"""Built-in habit profiles and curated ladders.

Profiles seed the default ladder (one free pick, more with Premium). Curated
ladders are Premium templates copied into the custom-ladder library. Neither
is persisted: only the ladders built from them are.
"""

from __future__ import annotations

from .type_defs import ProfileData

# ------------------------------------------------------------------------------------------------
# Default Profiles
# ------------------------------------------------------------------------------------------------
PROFILE_BASIC_WELLNESS = "Basic Wellness"
PROFILE_MORNING_STARTER = "Morning Starter"
PROFILE_FOCUS_ESSENTIALS = "Focus Essentials"
PROFILE_SLEEP_HYGIENE = "Sleep Hygiene"
PROFILE_ADVANCED_PRODUCTIVITY = "Advanced Productivity"
PROFILE_MENTAL_RESILIENCE = "Mental Resilience"
PROFILE_PHYSICAL_OPTIMIZATION = "Physical Optimization"
PROFILE_CREATIVE_MASTERY = "Creative Mastery"
PROFILE_LEADERSHIP_EXCELLENCE = "Leadership Excellence"

HABIT_PROFILES: list[ProfileData] = [
    # Free
    {
        "name": PROFILE_BASIC_WELLNESS,
        "emoji": "🌱",
        "description": "Essential habits for a healthy foundation",
        "is_free": True,
        "habits": [
            ("Drink water upon waking", "Start your day hydrated"),
            ("Take 3 deep breaths", "Center yourself for the day"),
            ("Eat one piece of fruit", "Get essential vitamins"),
            ("Step outside for 2 minutes", "Connect with nature"),
            ("Express gratitude", "End your day positively"),
        ],
    },
    {
        "name": PROFILE_MORNING_STARTER,
        "emoji": "☀️",
        "description": "Simple routines to start your day right",
        "is_free": True,
        "habits": [
            ("Make your bed", "Start with a small win"),
            ("Drink a glass of water", "Rehydrate after sleep"),
            ("Write 3 priorities", "Focus your day"),
            ("Do 5 jumping jacks", "Wake up your body"),
            ("Read for 5 minutes", "Feed your mind"),
        ],
    },
    {
        "name": PROFILE_FOCUS_ESSENTIALS,
        "emoji": "🎯",
        "description": "Core habits for better concentration",
        "is_free": True,
        "habits": [
            ("Clear your workspace", "Start with a clean environment"),
            ("Set a 25-minute timer", "Use the Pomodoro technique"),
            ("Turn off notifications", "Eliminate distractions"),
            ("Take a 5-minute break", "Rest between focus sessions"),
            ("Review what you accomplished", "Celebrate your progress"),
        ],
    },
    {
        "name": PROFILE_SLEEP_HYGIENE,
        "emoji": "😴",
        "description": "Improve your sleep quality naturally",
        "is_free": True,
        "habits": [
            ("Set phone to Do Not Disturb", "Prepare for rest"),
            ("Dim the lights 1 hour before bed", "Signal your body it's bedtime"),
            ("Write tomorrow's top 3 tasks", "Clear your mind"),
            ("Do gentle stretches", "Relax your body"),
            ("Practice gratitude", "End with positive thoughts"),
        ],
    },
    # Premium
    {
        "name": PROFILE_ADVANCED_PRODUCTIVITY,
        "emoji": "⚡️",
        "description": "Advanced systems for peak performance",
        "is_free": False,
        "habits": [
            ("Review weekly goals", "Align daily actions with bigger picture"),
            ("Time-block your calendar", "Protect your most important work"),
            ("Batch similar tasks", "Maximize efficiency"),
            ("Practice saying no", "Protect your priorities"),
            ("Conduct weekly review", "Continuous improvement mindset"),
        ],
    },
    {
        "name": PROFILE_MENTAL_RESILIENCE,
        "emoji": "🧠",
        "description": "Build mental strength and emotional balance",
        "is_free": False,
        "habits": [
            ("Practice mindfulness meditation", "Build present-moment awareness"),
            ("Journal your emotions", "Process and understand feelings"),
            ("Challenge negative thoughts", "Develop cognitive flexibility"),
            ("Practice loving-kindness", "Cultivate compassion"),
            ("Reflect on growth", "Acknowledge your progress"),
        ],
    },
    {
        "name": PROFILE_PHYSICAL_OPTIMIZATION,
        "emoji": "💪",
        "description": "Optimize your physical health and energy",
        "is_free": False,
        "habits": [
            ("Track your heart rate variability", "Monitor recovery"),
            ("Do mobility work", "Maintain joint health"),
            ("Optimize your nutrition timing", "Fuel performance"),
            ("Practice breath work", "Enhance oxygen delivery"),
            ("Plan active recovery", "Smart rest and regeneration"),
        ],
    },
    {
        "name": PROFILE_CREATIVE_MASTERY,
        "emoji": "🎨",
        "description": "Unlock your creative potential",
        "is_free": False,
        "habits": [
            ("Morning pages", "Stream-of-consciousness writing"),
            ("Collect inspiration", "Gather ideas from the world"),
            ("Practice your craft", "Deliberate skill development"),
            ("Seek feedback", "Accelerate improvement"),
            ("Share your work", "Build courage and connection"),
        ],
    },
    {
        "name": PROFILE_LEADERSHIP_EXCELLENCE,
        "emoji": "👑",
        "description": "Develop leadership skills and presence",
        "is_free": False,
        "habits": [
            ("Listen actively in conversations", "Develop others"),
            ("Give meaningful recognition", "Appreciate contributions"),
            ("Reflect on decisions", "Improve judgment"),
            ("Seek diverse perspectives", "Expand your worldview"),
            ("Practice vulnerability", "Build authentic connections"),
        ],
    },
]

# Custom ladders may never carry these names
RESERVED_PROFILE_NAMES = frozenset(profile["name"] for profile in HABIT_PROFILES)


# ------------------------------------------------------------------------------------------------
# Curated Ladders (Premium)
# ------------------------------------------------------------------------------------------------
CURATED_LADDERS: list[ProfileData] = [
    {
        "name": "Morning Routine",
        "emoji": "🌅",
        "description": "Start your day with purpose and energy.",
        "is_free": False,
        "habits": [
            ("Drink a glass of water", "Hydrate your body after sleep."),
            ("Stretch for 5 minutes", "Wake up your muscles."),
            ("Plan your day", "Set your top 3 priorities."),
            ("Eat a healthy breakfast", "Fuel your body for the day."),
            ("Avoid phone for 30 mins", "Start your day with focus."),
        ],
    },
    {
        "name": "Focus & Flow",
        "emoji": "🎯",
        "description": "Enhance your concentration and productivity.",
        "is_free": False,
        "habits": [
            ("Work in 45-min blocks", "Use a timer to stay on task."),
            ("Take a 5-min break", "Rest your mind between focus blocks."),
            ("Disable notifications", "Minimize distractions."),
            ("Listen to focus music", "Create a productive environment."),
            ("Review your work", "Check your progress at the end."),
        ],
    },
    {
        "name": "Anxiety Reduction",
        "emoji": "🧘‍♀️",
        "description": "Find calm and reduce stress in your daily life.",
        "is_free": False,
        "habits": [
            ("Meditate for 10 minutes", "Practice mindfulness."),
            ("Journal your thoughts", "Write down what's on your mind."),
            ("Practice deep breathing", "Take 5 deep breaths."),
            ("Go for a walk in nature", "Connect with the outdoors."),
            ("Limit caffeine intake", "Avoid overstimulation."),
        ],
    },
    {
        "name": "Discipline Builder",
        "emoji": "💪",
        "description": "Strengthen your self-control and willpower.",
        "is_free": False,
        "habits": [
            ("Make your bed", "Start your day with a small win."),
            ("Do one difficult task first", "Tackle your most important work."),
            ("No snoozing", "Wake up at your first alarm."),
            ("Track your progress", "Review your habits daily."),
            ("Plan tomorrow tonight", "Prepare for a successful day."),
        ],
    },
]


def get_profile(name: str) -> ProfileData | None:
    """Look up a built-in profile by name (case-insensitive)."""
    return _find_by_name(HABIT_PROFILES, name)


def get_curated_ladder(name: str) -> ProfileData | None:
    """Look up a curated ladder by name (case-insensitive)."""
    return _find_by_name(CURATED_LADDERS, name)


def is_reserved_name(name: str) -> bool:
    """Check if a ladder name collides with a built-in profile."""
    return name.strip() in RESERVED_PROFILE_NAMES


def _find_by_name(templates: list[ProfileData], name: str) -> ProfileData | None:
    wanted = name.strip().casefold()
    for template in templates:
        if template["name"].casefold() == wanted:
            return template
    return None
