# Stock levels written on the very first access to an empty inventory store
DEFAULT_INVENTORY = [
    {"id": "j1", "name": "Diamond Teardrop Necklace", "stockQuantity": 50},
    {"id": "j2", "name": "Golden Infinity Bracelet", "stockQuantity": 75},
    {"id": "j3", "name": "Emerald & Sapphire Earrings", "stockQuantity": 40},
    {"id": "j4", "name": "Diamond Halo Ring", "stockQuantity": 30},
    {"id": "j5", "name": "Charm Anklet Collection", "stockQuantity": 100},
    {"id": "j6", "name": "Pearl & Gemstone Brooch", "stockQuantity": 60},
    {"id": "j7", "name": "Cuban Link Chain", "stockQuantity": 25},
    {"id": "c1", "name": "Gold Embroidered Evening Gown", "stockQuantity": 35},
    {"id": "c2", "name": "Gold Button Blazer", "stockQuantity": 80},
    {"id": "c3", "name": "Gold Embroidered Silk Blouse", "stockQuantity": 100},
    {"id": "c4", "name": "Gold & Black Evening Clutch", "stockQuantity": 120},
]
