from typing import Final

STORE_DATE_FORMAT: Final[str] = "%Y-%m-%d"
DISPLAY_DATE_FORMAT: Final[str] = "%d.%m.%Y"

GENERATED_CATEGORY: Final[str] = "Ingredientes"
MANUAL_CATEGORY: Final[str] = "Manual"

WEEK_OFFSETS: Final[tuple[int, ...]] = (0, 1)
DAY_NAMES: Final[tuple[str, ...]] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
)
MEAL_TYPE_LABELS: Final[dict[str, str]] = {"LUNCH": "Comida", "DINNER": "Cena"}

INGREDIENTS_PROMPT_TEMPLATE: Final[str] = (
    """
    List the ingredients needed to cook the dish below, written in Spanish,
    lower case, without quantities or units. Answer ONLY with a JSON array of
    strings, for example: ["huevos", "patatas", "cebolla", "aceite de oliva"]

    Dish:
    """
)

# Static dictionary used when the AI is not configured or fails.
# Keys are normalized dish names (lower case, no accents).
FALLBACK_INGREDIENTS: Final[dict[str, list[str]]] = {
    "tortilla de patata": ["Huevos", "Patatas", "Cebolla", "Aceite de oliva", "Sal"],
    "tortilla": ["Huevos", "Patatas", "Aceite de oliva", "Sal"],
    "paella": ["Arroz", "Pollo", "Judias verdes", "Tomate", "Azafran", "Aceite de oliva"],
    "paella de marisco": ["Arroz", "Gambas", "Mejillones", "Calamar", "Tomate", "Azafran"],
    "lentejas": ["Lentejas", "Chorizo", "Zanahoria", "Patatas", "Cebolla", "Pimenton"],
    "garbanzos": ["Garbanzos", "Espinacas", "Ajo", "Comino", "Aceite de oliva"],
    "cocido": ["Garbanzos", "Ternera", "Tocino", "Chorizo", "Patatas", "Zanahoria", "Repollo"],
    "gazpacho": ["Tomate", "Pepino", "Pimiento verde", "Ajo", "Pan", "Aceite de oliva", "Vinagre"],
    "salmorejo": ["Tomate", "Pan", "Ajo", "Aceite de oliva", "Huevos", "Jamon serrano"],
    "ensalada": ["Lechuga", "Tomate", "Cebolla", "Aceite de oliva"],
    "ensalada cesar": ["Lechuga", "Pollo", "Pan", "Queso parmesano", "Salsa cesar"],
    "macarrones": ["Macarrones", "Tomate frito", "Carne picada", "Cebolla", "Queso rallado"],
    "espaguetis": ["Espaguetis", "Tomate", "Ajo", "Aceite de oliva"],
    "espaguetis carbonara": ["Espaguetis", "Huevos", "Bacon", "Queso parmesano", "Pimienta"],
    "lasana": ["Placas de lasana", "Carne picada", "Tomate frito", "Bechamel", "Queso rallado"],
    "pizza": ["Masa de pizza", "Tomate frito", "Mozzarella", "Oregano"],
    "pollo al horno": ["Pollo", "Patatas", "Cebolla", "Ajo", "Limon"],
    "pollo": ["Pollo", "Ajo", "Aceite de oliva"],
    "pescado": ["Pescado", "Limon", "Ajo", "Perejil"],
    "merluza": ["Merluza", "Harina", "Huevos", "Limon"],
    "salmon": ["Salmon", "Limon", "Eneldo"],
    "albondigas": ["Carne picada", "Huevos", "Pan rallado", "Tomate", "Cebolla", "Ajo"],
    "hamburguesa": ["Carne picada", "Pan de hamburguesa", "Lechuga", "Tomate", "Queso"],
    "crema de verduras": ["Calabacin", "Zanahoria", "Puerro", "Patatas", "Cebolla"],
    "pure de verduras": ["Calabacin", "Zanahoria", "Puerro", "Patatas"],
    "arroz a la cubana": ["Arroz", "Huevos", "Tomate frito", "Platano"],
    "arroz": ["Arroz", "Ajo", "Aceite de oliva"],
    "sopa": ["Caldo", "Fideos", "Zanahoria", "Apio"],
    "fajitas": ["Tortillas de trigo", "Pollo", "Pimiento rojo", "Pimiento verde", "Cebolla"],
    "tacos": ["Tortillas de maiz", "Carne picada", "Lechuga", "Tomate", "Queso"],
    "revuelto": ["Huevos", "Champinones", "Ajo", "Aceite de oliva"],
    "huevos rotos": ["Huevos", "Patatas", "Jamon serrano", "Aceite de oliva"],
    "pisto": ["Calabacin", "Berenjena", "Pimiento", "Tomate", "Cebolla"],
    "croquetas": ["Leche", "Harina", "Mantequilla", "Jamon serrano", "Huevos", "Pan rallado"],
    "filete": ["Filetes de ternera", "Patatas", "Aceite de oliva", "Sal"],
    "sandwich": ["Pan de molde", "Jamon york", "Queso"],
}
