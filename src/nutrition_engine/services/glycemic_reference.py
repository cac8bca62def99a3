"""Reference glycemic index values for common foods.

Values follow the international GI tables (glucose = 100). Keys are in
normalized form: lower-case, without preparation words such as "boiled".
"""

from nutrition_engine.domain.glycemic import FoodCategory, GIReference, ReferenceTier

_C = FoodCategory
_T = ReferenceTier

GI_REFERENCE: tuple[GIReference, ...] = (
    # Breads
    GIReference(
        "white bread", 75, _C.BREAD, _T.HIGH, ("white toast", "sandwich bread")
    ),
    GIReference(
        "whole wheat bread",
        74,
        _C.BREAD,
        _T.HIGH,
        ("wholemeal bread", "whole grain bread"),
    ),
    GIReference("sourdough bread", 54, _C.BREAD, _T.MEDIUM, ("sourdough",)),
    GIReference("rye bread", 58, _C.BREAD, _T.MEDIUM, ("pumpernickel",)),
    GIReference("bagel", 72, _C.BREAD, _T.MEDIUM, ("bagels",)),
    GIReference("pita bread", 68, _C.BREAD, _T.MEDIUM, ("pita",)),
    GIReference("corn tortilla", 46, _C.BREAD, _T.MEDIUM),
    GIReference("wheat tortilla", 30, _C.BREAD, _T.MEDIUM, ("flour tortilla",)),
    GIReference("croissant", 67, _C.BREAD, _T.MEDIUM),
    # Cereals
    GIReference("cornflakes", 81, _C.CEREAL, _T.HIGH, ("corn flakes",)),
    GIReference("instant oatmeal", 79, _C.CEREAL, _T.HIGH, ("instant oats",)),
    GIReference("oatmeal", 55, _C.CEREAL, _T.HIGH, ("porridge", "rolled oats")),
    GIReference("muesli", 57, _C.CEREAL, _T.MEDIUM),
    GIReference("granola", 55, _C.CEREAL, _T.LOW),
    # Rice
    GIReference("white rice", 73, _C.RICE, _T.HIGH, ("rice",)),
    GIReference("brown rice", 68, _C.RICE, _T.HIGH),
    GIReference("basmati rice", 58, _C.RICE, _T.MEDIUM, ("basmati",)),
    GIReference("jasmine rice", 89, _C.RICE, _T.MEDIUM),
    # Pasta
    GIReference("spaghetti", 49, _C.PASTA, _T.HIGH, ("pasta",)),
    GIReference("whole wheat pasta", 48, _C.PASTA, _T.MEDIUM, ("wholemeal pasta",)),
    GIReference("macaroni", 47, _C.PASTA, _T.MEDIUM),
    GIReference("rice noodles", 53, _C.PASTA, _T.MEDIUM),
    # Grains
    GIReference("quinoa", 53, _C.GRAIN, _T.MEDIUM),
    GIReference("couscous", 65, _C.GRAIN, _T.MEDIUM),
    GIReference("barley", 28, _C.GRAIN, _T.HIGH, ("pearl barley",)),
    GIReference("bulgur", 47, _C.GRAIN, _T.MEDIUM, ("bulgur wheat",)),
    GIReference("buckwheat", 45, _C.GRAIN, _T.MEDIUM),
    # Legumes
    GIReference("lentils", 32, _C.LEGUME, _T.HIGH, ("lentil", "dal")),
    GIReference("chickpeas", 28, _C.LEGUME, _T.HIGH, ("chickpea", "garbanzo beans")),
    GIReference("kidney beans", 24, _C.LEGUME, _T.HIGH),
    GIReference("black beans", 30, _C.LEGUME, _T.MEDIUM),
    GIReference("soybeans", 16, _C.LEGUME, _T.MEDIUM, ("edamame",)),
    GIReference("green peas", 51, _C.LEGUME, _T.MEDIUM),
    # Vegetables
    GIReference("potato", 78, _C.VEGETABLE, _T.HIGH, ("potatoes",)),
    GIReference("mashed potato", 87, _C.VEGETABLE, _T.MEDIUM, ("mashed potatoes",)),
    GIReference("french fries", 63, _C.VEGETABLE, _T.MEDIUM, ("fries",)),
    GIReference("sweet potato", 63, _C.VEGETABLE, _T.HIGH, ("yam",)),
    GIReference("carrots", 39, _C.VEGETABLE, _T.HIGH, ("carrot",)),
    GIReference("sweet corn", 52, _C.VEGETABLE, _T.HIGH, ("corn on the cob",)),
    GIReference("pumpkin", 64, _C.VEGETABLE, _T.MEDIUM),
    GIReference("beetroot", 64, _C.VEGETABLE, _T.MEDIUM, ("beets",)),
    GIReference("parsnip", 52, _C.VEGETABLE, _T.LOW, ("parsnips",)),
    # Fruit
    GIReference("apple", 36, _C.FRUIT, _T.HIGH, ("apples",)),
    GIReference("banana", 51, _C.FRUIT, _T.HIGH, ("bananas",)),
    GIReference("orange", 43, _C.FRUIT, _T.HIGH, ("oranges",)),
    GIReference("grapefruit", 25, _C.FRUIT, _T.MEDIUM),
    GIReference("grapes", 59, _C.FRUIT, _T.MEDIUM, ("grape",)),
    GIReference("watermelon", 76, _C.FRUIT, _T.MEDIUM),
    GIReference("pineapple", 59, _C.FRUIT, _T.MEDIUM),
    GIReference("mango", 51, _C.FRUIT, _T.MEDIUM),
    GIReference("strawberries", 41, _C.FRUIT, _T.MEDIUM, ("strawberry",)),
    GIReference("blueberries", 53, _C.FRUIT, _T.MEDIUM, ("blueberry",)),
    GIReference("cherries", 22, _C.FRUIT, _T.MEDIUM, ("cherry",)),
    GIReference("pear", 38, _C.FRUIT, _T.HIGH, ("pears",)),
    GIReference("peach", 42, _C.FRUIT, _T.MEDIUM, ("peaches",)),
    GIReference("kiwi", 53, _C.FRUIT, _T.MEDIUM, ("kiwifruit",)),
    GIReference("dates", 42, _C.FRUIT, _T.MEDIUM),
    GIReference("raisins", 64, _C.FRUIT, _T.MEDIUM),
    # Dairy
    GIReference("whole milk", 39, _C.DAIRY, _T.HIGH, ("milk",)),
    GIReference("skim milk", 37, _C.DAIRY, _T.HIGH, ("skimmed milk",)),
    GIReference("soy milk", 34, _C.DAIRY, _T.MEDIUM),
    GIReference("yogurt", 41, _C.FERMENTED, _T.MEDIUM, ("yoghurt",)),
    GIReference("ice cream", 51, _C.DAIRY, _T.MEDIUM),
    # Beverages
    GIReference("orange juice", 50, _C.BEVERAGE, _T.HIGH),
    GIReference("apple juice", 41, _C.BEVERAGE, _T.HIGH),
    GIReference(
        "cola", 63, _C.BEVERAGE, _T.MEDIUM, ("coca cola", "soda", "soft drink")
    ),
    GIReference("sports drink", 78, _C.BEVERAGE, _T.MEDIUM, ("gatorade",)),
    # Snacks
    GIReference("potato chips", 56, _C.SNACK, _T.MEDIUM, ("crisps",)),
    GIReference("popcorn", 65, _C.SNACK, _T.MEDIUM),
    GIReference("pretzels", 83, _C.SNACK, _T.MEDIUM, ("pretzel",)),
    GIReference("rice cakes", 82, _C.SNACK, _T.MEDIUM, ("rice cake",)),
    GIReference("milk chocolate", 43, _C.SNACK, _T.MEDIUM, ("chocolate",)),
    GIReference("dark chocolate", 23, _C.SNACK, _T.LOW),
    GIReference("peanuts", 14, _C.SNACK, _T.MEDIUM, ("peanut",)),
    GIReference("cashews", 25, _C.SNACK, _T.LOW, ("cashew",)),
    GIReference("doughnut", 76, _C.SNACK, _T.MEDIUM, ("donut",)),
    # Sweeteners
    GIReference("table sugar", 65, _C.SWEETENER, _T.HIGH, ("sucrose", "white sugar")),
    GIReference("honey", 61, _C.SWEETENER, _T.MEDIUM),
    GIReference("maple syrup", 54, _C.SWEETENER, _T.MEDIUM),
    GIReference("glucose", 100, _C.SWEETENER, _T.HIGH, ("dextrose",)),
    # Mixed meals
    GIReference("pizza", 60, _C.MIXED_MEAL, _T.MEDIUM),
    GIReference("sushi", 52, _C.MIXED_MEAL, _T.MEDIUM),
)

CATEGORY_DEFAULT_GI: dict[FoodCategory, int] = {
    FoodCategory.BREAD: 70,
    FoodCategory.CEREAL: 60,
    FoodCategory.RICE: 70,
    FoodCategory.PASTA: 50,
    FoodCategory.GRAIN: 55,
    FoodCategory.LEGUME: 30,
    FoodCategory.VEGETABLE: 40,
    FoodCategory.FRUIT: 45,
    FoodCategory.DAIRY: 35,
    FoodCategory.FERMENTED: 35,
    FoodCategory.BEVERAGE: 55,
    FoodCategory.SNACK: 60,
    FoodCategory.SWEETENER: 65,
    FoodCategory.MIXED_MEAL: 55,
}

# First matching category wins. A leading space anchors a keyword to the
# start of a word so " egg" skips "veggie".
CATEGORY_KEYWORDS: tuple[tuple[FoodCategory, tuple[str, ...]], ...] = (
    (
        FoodCategory.BREAD,
        (
            "bread",
            "toast",
            "roll",
            "bun",
            "bagel",
            "muffin",
            "croissant",
            "pita",
            "tortilla",
        ),
    ),
    (
        FoodCategory.CEREAL,
        ("cereal", "oatmeal", "granola", "muesli", "porridge", "flakes"),
    ),
    (FoodCategory.RICE, ("rice", "risotto")),
    (
        FoodCategory.PASTA,
        (
            "pasta",
            "spaghetti",
            "noodle",
            "penne",
            "macaroni",
            "fettuccine",
            "linguine",
            "lasagna",
        ),
    ),
    (
        FoodCategory.GRAIN,
        (
            "quinoa",
            "couscous",
            "bulgur",
            "barley",
            "buckwheat",
            "millet",
            "farro",
            "polenta",
        ),
    ),
    (
        FoodCategory.LEGUME,
        ("bean", "lentil", "chickpea", "pea", "hummus", "dal", "falafel"),
    ),
    (
        FoodCategory.VEGETABLE,
        (
            "vegetable",
            "salad",
            "broccoli",
            "spinach",
            "carrot",
            "potato",
            "tomato",
            "pepper",
            "onion",
            "mushroom",
            "celery",
            "corn",
            "squash",
        ),
    ),
    (
        FoodCategory.FRUIT,
        (
            "apple",
            "banana",
            "orange",
            "grape",
            "berry",
            "melon",
            "mango",
            "peach",
            "pear",
            "plum",
            "cherry",
            "pineapple",
            "fruit",
        ),
    ),
    (FoodCategory.FERMENTED, ("yogurt", "kefir", "kimchi", "sauerkraut", "miso")),
    (
        FoodCategory.DAIRY,
        ("milk", "cheese", "cream", "ice cream", "custard", "pudding"),
    ),
    (
        FoodCategory.BEVERAGE,
        ("juice", "soda", "cola", "drink", "smoothie", "shake"),
    ),
    (
        FoodCategory.SNACK,
        (
            "chip",
            "cracker",
            "cookie",
            "cake",
            "chocolate",
            "candy",
            "nut",
            "bar",
            "popcorn",
            "pretzel",
        ),
    ),
    (FoodCategory.SWEETENER, ("sugar", "honey", "syrup", "sweetener")),
    (
        FoodCategory.MIXED_MEAL,
        (
            "pizza",
            "burger",
            "sandwich",
            "taco",
            "burrito",
            "curry",
            "soup",
            "stew",
            "casserole",
        ),
    ),
    (
        FoodCategory.FISH,
        (
            "fish",
            "salmon",
            "tuna",
            " cod",
            "sardine",
            "trout",
            "mackerel",
            "shrimp",
            "prawn",
        ),
    ),
    (
        FoodCategory.MEAT,
        (
            "chicken",
            "beef",
            "pork",
            "turkey",
            "lamb",
            "steak",
            "bacon",
            " ham",
            "sausage",
            "veal",
        ),
    ),
    (FoodCategory.EGG, (" egg", " omelet")),
)
