SCHEMA_SQL = r"""
-- Sizes (18x24, 24x30, ...)
CREATE TABLE IF NOT EXISTS sizes (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  code TEXT NOT NULL UNIQUE,
  description TEXT,
  sort_order INTEGER NOT NULL DEFAULT 0
);

-- Purchases (one bill = one purchase)
-- Header fields stay nullable: legacy rows are filled in by the default-field patcher.
CREATE TABLE IF NOT EXISTS purchases (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  purchase_date TEXT,                    -- ISO date
  vendor TEXT,
  total_cost REAL,
  transport_cost REAL,
  gst REAL,
  total_weight_kg REAL,
  avg_cost_per_kg REAL,                  -- (total_cost + transport_cost + gst) / total_weight_kg
  bill_photo_ref TEXT,
  branch_id TEXT,
  created_at TEXT,                       -- ISO datetime
  created_by TEXT
);

-- Per-size stock lines of a purchase
CREATE TABLE IF NOT EXISTS purchase_stock (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  purchase_id INTEGER NOT NULL,
  size TEXT NOT NULL,
  pieces INTEGER NOT NULL,
  weight REAL NOT NULL,
  FOREIGN KEY (purchase_id) REFERENCES purchases(id) ON DELETE CASCADE
);

-- Sales
CREATE TABLE IF NOT EXISTS sales_entries (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  sale_ts TEXT NOT NULL,                 -- ISO datetime
  branch_id TEXT,
  size TEXT NOT NULL,
  pieces INTEGER NOT NULL,
  amount REAL NOT NULL
);

-- Derived inventory, rebuilt wholesale by the backfill job
CREATE TABLE IF NOT EXISTS inventory (
  doc_id TEXT PRIMARY KEY,               -- {branch_id}_{size}
  branch_id TEXT NOT NULL,
  size TEXT NOT NULL,
  total_pieces_in_stock INTEGER NOT NULL,
  total_weight_in_stock REAL NOT NULL,
  average_cost_per_kg REAL NOT NULL,
  total_cost_value REAL NOT NULL,
  last_updated TEXT NOT NULL
);
"""
