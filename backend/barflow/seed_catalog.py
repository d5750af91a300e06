# Overview: Default rows written into a brand new store.

DEFAULT_CATEGORIES = [
    {"name": "Cocktails", "icon": "Martini"},
    {"name": "Beers", "icon": "Beer"},
    {"name": "Wines", "icon": "Wine"},
    {"name": "Softs", "icon": "GlassWater"},
    {"name": "Snacks", "icon": "Utensils"},
]

DEFAULT_PRODUCTS = [
    {"name": "Mojito", "price_cents": 1000, "cost_price_cents": 300, "stock": 50, "alert_threshold": 10,
     "category": "Cocktails", "description": "Fresh mint, lime, white rum, soda."},
    {"name": "Old Fashioned", "price_cents": 1200, "cost_price_cents": 400, "stock": 40, "alert_threshold": 10,
     "category": "Cocktails", "description": "Bourbon, angostura bitters, sugar."},
    {"name": "Blonde Pint", "price_cents": 700, "cost_price_cents": 200, "stock": 100, "alert_threshold": 10,
     "category": "Beers", "description": "Light and refreshing lager."},
    {"name": "Craft IPA", "price_cents": 900, "cost_price_cents": 300, "stock": 80, "alert_threshold": 10,
     "category": "Beers", "description": "Citrus notes, pronounced bitterness."},
    {"name": "Chardonnay", "price_cents": 800, "cost_price_cents": 300, "stock": 60, "alert_threshold": 10,
     "category": "Wines", "description": "Dry, fruity white wine."},
    {"name": "Coca Cola", "price_cents": 400, "cost_price_cents": 100, "stock": 120, "alert_threshold": 10,
     "category": "Softs"},
    {"name": "Nachos", "price_cents": 1200, "cost_price_cents": 400, "stock": 30, "alert_threshold": 5,
     "category": "Snacks", "description": "Guacamole, salsa, melted cheese."},
    {"name": "Mixed Board", "price_cents": 1800, "cost_price_cents": 800, "stock": 20, "alert_threshold": 5,
     "category": "Snacks", "description": "Cured meats and aged cheeses."},
    {"name": "Espresso Martini", "price_cents": 1300, "cost_price_cents": 500, "stock": 35, "alert_threshold": 10,
     "category": "Cocktails", "description": "Vodka, coffee liqueur, fresh espresso."},
    {"name": "Orange Juice", "price_cents": 500, "cost_price_cents": 150, "stock": 60, "alert_threshold": 10,
     "category": "Softs"},
]

DEFAULT_TABLES = [
    {"name": "S1", "zone": "Salle"},
    {"name": "S2", "zone": "Salle"},
    {"name": "T1", "zone": "Terrasse"},
    {"name": "Bar 1", "zone": "Bar"},
    {"name": "VIP A", "zone": "VIP"},
]

# Default PINs (CHANGE IN PRODUCTION!)
DEFAULT_STAFF = [
    {"name": "Direction", "role": "ADMIN", "pin": "0000"},
    {"name": "Barman", "role": "BARTENDER", "pin": "1234"},
    {"name": "Serveur", "role": "SERVER", "pin": "5678"},
]
