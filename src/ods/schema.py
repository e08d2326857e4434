SCHEMA_VERSION = 1

SCHEMA_SQL = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS schema_version (
  version INTEGER PRIMARY KEY,
  applied_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS buy_orders (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  order_id TEXT NOT NULL UNIQUE,
  product_code TEXT NOT NULL,
  side TEXT NOT NULL,
  price TEXT NOT NULL,
  size TEXT NOT NULL,
  exchange TEXT NOT NULL,
  status TEXT NOT NULL,
  remarks TEXT NULL,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS sell_orders (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  parent_order_id TEXT NOT NULL,
  order_id TEXT NOT NULL UNIQUE,
  product_code TEXT NOT NULL,
  side TEXT NOT NULL,
  price TEXT NOT NULL,
  size TEXT NOT NULL,
  exchange TEXT NOT NULL,
  status TEXT NOT NULL,
  remarks TEXT NULL,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_sell_orders_status_updated
ON sell_orders(status, updated_at DESC);
CREATE INDEX IF NOT EXISTS idx_sell_orders_parent
ON sell_orders(parent_order_id);

CREATE TABLE IF NOT EXISTS price_histories (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  recorded_at TEXT NOT NULL,
  product_code TEXT NOT NULL,
  price TEXT NOT NULL,
  price_ratio_24h TEXT NULL
);
CREATE INDEX IF NOT EXISTS idx_price_histories_product_recorded
ON price_histories(product_code, recorded_at);
"""
