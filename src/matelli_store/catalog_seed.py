"""Default menu written by the initial catalog sync."""

from matelli_store.domain.meals import Meal, MealCategory

INITIAL_MEALS: list[Meal] = [
    Meal.create(
        id="b1",
        name="Tapioca de Ovos e Queijo",
        description=(
            "Tapioca crocante recheada com ovos mexidos cremosos e queijo branco."
        ),
        category=MealCategory.BREAKFAST,
        image="https://picsum.photos/seed/tap/400/300",
        tags=["Proteico", "Sem Glúten"],
        price="18.90",
        weight="250g",
        ingredients={"Goma de tapioca": "80g", "Ovos": "2 un", "Queijo branco": "40g"},
    ),
    Meal.create(
        id="b2",
        name="Omelete de Espinafre",
        description="Omelete leve com espinafre fresco e ricota temperada.",
        category=MealCategory.BREAKFAST,
        image="https://picsum.photos/seed/om/400/300",
        tags=["Low Carb", "Vegetariano"],
        price="16.50",
        weight="200g",
        ingredients={"Ovos": "3 un", "Espinafre": "50g", "Ricota": "40g"},
    ),
    Meal.create(
        id="b3",
        name="Panqueca de Banana",
        description="Panquecas feitas com banana, aveia e um toque de mel.",
        category=MealCategory.BREAKFAST,
        image="https://picsum.photos/seed/pan/400/300",
        tags=["Energético", "Saudável"],
        price="19.90",
        weight="220g",
        ingredients={"Banana": "1 un", "Aveia": "40g", "Ovos": "1 un", "Mel": "10g"},
    ),
    Meal.create(
        id="s1",
        name="Vitamina de Morango e Chia",
        description=(
            "Mix refrescante de morangos selecionados, leite vegetal "
            "e sementes de chia."
        ),
        category=MealCategory.SMOOTHIE,
        image="https://picsum.photos/seed/str/400/300",
        tags=["Fibras", "Detox"],
        price="14.90",
        weight="350ml",
        ingredients={"Morango": "120g", "Leite vegetal": "200ml", "Chia": "10g"},
    ),
    Meal.create(
        id="s2",
        name="Tropical Mango",
        description="Manga madura batida com água de coco e um toque de gengibre.",
        category=MealCategory.SMOOTHIE,
        image="https://picsum.photos/seed/man/400/300",
        tags=["Imunidade", "Refrescante"],
        price="15.50",
        weight="350ml",
        ingredients={"Manga": "150g", "Água de coco": "200ml", "Gengibre": "5g"},
    ),
    Meal.create(
        id="l1",
        name="Frango Grelhado com Legumes",
        description=(
            "Peito de frango marinado em ervas finas com mix de legumes ao vapor."
        ),
        category=MealCategory.LUNCH,
        image="https://picsum.photos/seed/chi/400/300",
        tags=["Proteico", "Fitness"],
        price="28.90",
        weight="400g",
        ingredients={
            "Peito de frango": "150g",
            "Brócolis": "80g",
            "Cenoura": "60g",
            "Cebola": "20g",
        },
    ),
    Meal.create(
        id="l2",
        name="Salmão ao Molho de Maracujá",
        description=(
            "Filé de salmão grelhado servido com arroz integral "
            "e purê de batata doce."
        ),
        category=MealCategory.LUNCH,
        image="https://picsum.photos/seed/sal/400/300",
        tags=["Ômega 3", "Gourmet"],
        price="34.90",
        weight="380g",
        ingredients={
            "Salmão": "130g",
            "Arroz integral": "90g",
            "Batata doce": "100g",
            "Maracujá": "1 un",
        },
    ),
    Meal.create(
        id="de1",
        name="Mousse de Chocolate 70%",
        description="Mousse aerada de chocolate amargo com nibs de cacau.",
        category=MealCategory.DESSERT,
        image="https://picsum.photos/seed/choc/400/300",
        tags=["Sem Açúcar", "Fit"],
        price="12.00",
        weight="100g",
        ingredients={"Chocolate 70%": "40g", "Creme de leite": "50g"},
    ),
    Meal.create(
        id="de2",
        name="Pudim de Chia com Coco",
        description="Pudim cremoso de chia hidratada no leite de coco.",
        category=MealCategory.DESSERT,
        image="https://picsum.photos/seed/chia/400/300",
        tags=["Vegano", "Fibras"],
        price="11.50",
        weight="120g",
        ingredients={"Chia": "20g", "Leite de coco": "100ml"},
    ),
    Meal.create(
        id="d1",
        name="Sopa de Abóbora Cabotiá",
        description="Creme de abóbora cabotiá com gengibre e azeite.",
        category=MealCategory.DINNER,
        image="https://picsum.photos/seed/soup/400/300",
        tags=["Leve", "Conforto"],
        price="22.50",
        weight="450ml",
        ingredients={"Abóbora cabotiá": "300g", "Cebola": "30g", "Gengibre": "5g"},
    ),
    Meal.create(
        id="d2",
        name="Quiche de Alho Poró",
        description="Quiche de massa integral recheada com alho poró e queijo.",
        category=MealCategory.DINNER,
        image="https://picsum.photos/seed/quiche/400/300",
        tags=["Vegetariano"],
        price="24.90",
        weight="280g",
        ingredients={"Alho poró": "80g", "Ovos": "2 un", "Farinha integral": "60g"},
    ),
]
