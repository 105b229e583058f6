"""Static allergen catalog (single source of truth)."""

from functools import lru_cache

from allergen_filter.domain.allergens import Allergen, AllergenKind, AllergenRegistry

_MEAT = ("meat", "chicken", "beef", "pork", "lamb", "bacon", "ham", "sausage")

DIETARY_PREFERENCES: tuple[Allergen, ...] = (
    Allergen(
        id="vegetarian",
        label="Vegetarian",
        icon="🥗",
        column_name="Vegetarian",
        kind=AllergenKind.DIETARY,
        keywords=(*_MEAT, "fish", "seafood"),
        synonyms=("veggie", "no meat", "meatless"),
    ),
    Allergen(
        id="vegan",
        label="Vegan",
        icon="🥦",
        column_name="Vegan",
        kind=AllergenKind.DIETARY,
        keywords=(
            *_MEAT[:7],
            "fish",
            "seafood",
            "milk",
            "cheese",
            "butter",
            "cream",
            "yogurt",
            "egg",
            "honey",
        ),
        synonyms=("plant-based", "plant based", "no animal"),
    ),
)

# Ordered by prevalence, most common first.
ALLERGENS: tuple[Allergen, ...] = (
    Allergen(
        id="peanuts",
        label="Peanuts",
        icon="🥜",
        column_name="PEANUT FREE",
        keywords=("peanut", "groundnut", "arachis", "monkey nut"),
        synonyms=("peanut", "groundnut", "groundnuts", "arachis"),
    ),
    Allergen(
        id="treenuts",
        label="Tree Nuts",
        icon="🌰",
        column_name="TREE NUT FREE",
        keywords=(
            "almond",
            "walnut",
            "cashew",
            "pistachio",
            "pecan",
            "hazelnut",
            "macadamia",
            "brazil nut",
            "chestnut",
            "pine nut",
        ),
        synonyms=("tree nut", "tree nuts", "nuts", "nut allergy"),
    ),
    Allergen(
        id="eggs",
        label="Eggs",
        icon="🥚",
        column_name="EGG FREE",
        keywords=(
            "egg",
            "albumin",
            "mayonnaise",
            "meringue",
            "aioli",
            "hollandaise",
            "custard",
        ),
        synonyms=("egg", "ova", "albumin", "mayonnaise", "mayo", "meringue"),
    ),
    Allergen(
        id="dairy",
        label="Dairy",
        icon="🥛",
        column_name="DAIRY FREE",
        keywords=(
            "milk",
            "cheese",
            "parmesan",
            "butter",
            "cream",
            "yogurt",
            "whey",
            "casein",
            "lactose",
            "ghee",
            "curd",
            "paneer",
        ),
        synonyms=(
            "milk",
            "lactose",
            "cheese",
            "butter",
            "cream",
            "yogurt",
            "whey",
            "casein",
        ),
    ),
    Allergen(
        id="gluten",
        label="Gluten",
        icon="🌾",
        column_name="GLUTEN FREE",
        keywords=(
            "wheat",
            "flour",
            "bread",
            "pasta",
            "barley",
            "rye",
            "oats",
            "semolina",
            "spelt",
            "couscous",
            "bulgur",
            "farro",
            "crouton",
        ),
        synonyms=("barley", "rye", "celiac", "coeliac"),
    ),
    Allergen(
        id="soy",
        label="Soy",
        icon="🌱",
        column_name="SOY FREE",
        keywords=(
            "soy",
            "soya",
            "tofu",
            "edamame",
            "miso",
            "tempeh",
            "tamari",
            "soybean",
        ),
        synonyms=("soya", "soybean", "soybeans", "tofu", "edamame"),
    ),
    Allergen(
        id="fish",
        label="Fish",
        icon="🐟",
        column_name="FISH FREE",
        keywords=(
            "fish",
            "salmon",
            "tuna",
            "cod",
            "anchovy",
            "sardine",
            "mackerel",
            "trout",
            "bass",
            "halibut",
            "tilapia",
        ),
        synonyms=(
            "cod",
            "salmon",
            "tuna",
            "anchovy",
            "anchovies",
            "sardine",
            "sardines",
            "tilapia",
            "halibut",
        ),
    ),
    Allergen(
        id="shellfish",
        label="Shellfish",
        icon="🦐",
        column_name="SHELLFISH FREE",
        keywords=(
            "shrimp",
            "crab",
            "lobster",
            "prawn",
            "crawfish",
            "scampi",
            "crayfish",
            "langoustine",
        ),
        synonyms=(
            "shrimp",
            "crab",
            "lobster",
            "prawn",
            "prawns",
            "crawfish",
            "crayfish",
            "scampi",
        ),
    ),
    Allergen(
        id="sesame",
        label="Sesame",
        icon="🥯",
        column_name="SESAME FREE",
        keywords=("sesame", "tahini", "halvah", "hummus"),
        synonyms=("tahini", "sesame seeds"),
    ),
    Allergen(
        id="almond",
        label="Almond",
        icon="🌰",
        column_name="ALMOND FREE",
        keywords=("almond", "marzipan", "frangipane"),
        synonyms=("almonds",),
    ),
    Allergen(
        id="walnut",
        label="Walnut",
        icon="🌰",
        column_name="WALNUT FREE",
        keywords=("walnut",),
        synonyms=("walnuts",),
    ),
    Allergen(
        id="pistachio",
        label="Pistachio",
        icon="🥜",
        column_name="PISTACHIO FREE",
        keywords=("pistachio",),
        synonyms=("pistachios",),
    ),
    Allergen(
        id="wheat",
        label="Wheat",
        icon="🌾",
        column_name="WHEAT FREE",
        keywords=(
            "wheat",
            "flour",
            "bread",
            "pasta",
            "semolina",
            "couscous",
            "bulgur",
            "farro",
            "seitan",
        ),
        synonyms=("semolina", "durum", "spelt", "farina", "farro", "bulgur"),
    ),
    Allergen(
        id="mustard",
        label="Mustard",
        icon="🟡",
        column_name="MUSTARD FREE",
        keywords=("mustard", "dijon"),
        synonyms=("dijon",),
    ),
    Allergen(
        id="sulfites",
        label="Sulfites",
        icon="🧪",
        column_name="SULFITE FREE",
        keywords=("sulfite", "sulphite", "wine", "dried fruit"),
        synonyms=("sulfite", "sulphite", "sulphites", "so2", "preservatives"),
    ),
    Allergen(
        id="garlic",
        label="Garlic",
        icon="🧄",
        column_name="GARLIC FREE",
        keywords=("garlic", "aioli"),
    ),
    Allergen(
        id="onion",
        label="Onion",
        icon="🧅",
        column_name="ONION FREE",
        keywords=("onion", "shallot", "leek", "scallion", "chive"),
        synonyms=("onions", "shallot", "shallots", "leek", "leeks"),
    ),
    Allergen(
        id="celery",
        label="Celery",
        icon="🥬",
        column_name="CELERY FREE",
        keywords=("celery", "celeriac"),
        synonyms=("celeriac",),
    ),
    Allergen(
        id="chili",
        label="Chili",
        icon="🔥",
        column_name="CHILI FREE",
        keywords=(
            "chili",
            "chilli",
            "jalapeno",
            "cayenne",
            "sriracha",
            "hot sauce",
            "tabasco",
        ),
        synonyms=("chilli", "chillies", "chilies", "spicy", "hot pepper"),
    ),
    Allergen(
        id="capsicum",
        label="Capsicum",
        icon="🌶️",
        column_name="CAPSICUM FREE",
        keywords=("capsicum", "bell pepper", "pepper", "paprika", "pimento"),
        synonyms=("bell pepper", "bell peppers", "peppers"),
    ),
    Allergen(
        id="lupin",
        label="Lupin",
        icon="🌸",
        column_name="LUPIN FREE",
        keywords=("lupin", "lupini"),
        synonyms=("lupine", "lupini", "lupin beans"),
    ),
    Allergen(
        id="molluscs",
        label="Molluscs",
        icon="🦑",
        column_name="MOLLUSC FREE",
        keywords=(
            "squid",
            "octopus",
            "calamari",
            "clam",
            "mussel",
            "oyster",
            "scallop",
            "snail",
            "escargot",
        ),
        synonyms=(
            "mollusk",
            "mollusks",
            "squid",
            "octopus",
            "clam",
            "clams",
            "mussel",
            "mussels",
            "oyster",
            "oysters",
            "scallop",
            "scallops",
            "snail",
            "snails",
        ),
    ),
)


@lru_cache(maxsize=1)
def default_registry() -> AllergenRegistry:
    """Return the shared registry of dietary preferences and allergens."""
    return AllergenRegistry(allergens=DIETARY_PREFERENCES + ALLERGENS)
