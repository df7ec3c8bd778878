"""CSS styles for the dashboard.

Kept in its own module so the page template stays readable.
"""

CSS_STYLES = """
        :root {
            --bg: #f8fafc;
            --panel: #ffffff;
            --border: #e2e8f0;
            --text: #0f172a;
            --text-dim: #64748b;
            --green: #22c55e;
            --blue: #3b82f6;
            --amber: #f59e0b;
            --red: #ef4444;
            --purple: #a855f7;
            --gray: #94a3b8;
            --sidebar-width: 280px;
        }

        * { margin: 0; padding: 0; box-sizing: border-box; }

        body {
            font-family: system-ui, -apple-system, 'Segoe UI', Roboto, sans-serif;
            background: var(--bg);
            color: var(--text);
            height: 100vh;
            overflow: hidden;
        }

        .layout { display: flex; height: 100vh; }

        .sidebar {
            width: var(--sidebar-width);
            flex-shrink: 0;
            border-right: 1px solid var(--border);
            background: var(--panel);
            padding: 16px 12px;
            overflow-y: auto;
            transition: width 0.2s;
        }
        .sidebar.collapsed { width: 0; padding: 0; overflow: hidden; }
        .sidebar-title { font-size: 1.1rem; margin-bottom: 12px; }
        .sidebar-toggle {
            width: 28px;
            border: none;
            border-right: 1px solid var(--border);
            background: var(--panel);
            cursor: pointer;
            font-size: 1.2rem;
        }
        .search {
            width: 100%;
            padding: 6px 10px;
            border: 1px solid var(--border);
            border-radius: 6px;
            margin-bottom: 12px;
        }

        .nav-item, .tree-panel, .pinned-item {
            display: flex;
            align-items: center;
            gap: 8px;
            padding: 6px 8px;
            border-radius: 6px;
            cursor: pointer;
            font-size: 0.9rem;
        }
        .nav-item:hover, .tree-panel:hover, .pinned-item:hover, .tree-facility:hover { background: #f1f5f9; }
        .nav-item.active, .tree-panel.active, .pinned-item.active { background: #e2e8f0; font-weight: 600; }

        .pinned { margin: 12px 0; }
        .pinned h3 { font-size: 0.8rem; color: var(--text-dim); margin: 0 8px 6px; }

        .tree-facility {
            display: flex;
            justify-content: space-between;
            padding: 6px 8px;
            border-radius: 6px;
            cursor: pointer;
            font-weight: 500;
        }
        .tree-panels { margin-left: 14px; }
        .tree-panels[hidden] { display: none; }
        .pin-button { margin-left: auto; border: none; background: none; cursor: pointer; opacity: 0.4; }
        .pin-button.pinned { opacity: 1; }

        .dot { width: 8px; height: 8px; border-radius: 50%; flex-shrink: 0; }
        .dot.green, .dot.normal { background: var(--green); }
        .dot.amber, .dot.warning { background: var(--amber); }
        .dot.red, .dot.critical { background: var(--red); }
        .dot.gray { background: var(--gray); }

        .content { flex: 1; overflow-y: auto; padding: 24px; }
        .page-header { display: flex; justify-content: space-between; align-items: baseline; margin-bottom: 20px; }
        .updated { font-size: 0.8rem; color: var(--text-dim); }

        .card {
            background: var(--panel);
            border: 1px solid var(--border);
            border-radius: 10px;
            padding: 16px;
        }
        .card.clickable { cursor: pointer; }
        .card.clickable:hover { box-shadow: 0 2px 8px rgba(15, 23, 42, 0.08); }

        .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(260px, 1fr)); gap: 16px; margin-bottom: 24px; }
        .section-title { font-size: 1.05rem; margin: 8px 0 12px; }

        .score { font-size: 2rem; font-weight: 700; }
        .score.green { color: #16a34a; }
        .score.blue { color: #2563eb; }
        .score.amber { color: #d97706; }
        .score.red { color: #dc2626; }
        .rating { font-size: 0.8rem; color: var(--text-dim); margin-left: 6px; }
        .trend { font-size: 0.8rem; float: right; }
        .trend.up { color: var(--green); }
        .trend.down { color: var(--red); }

        .bar { display: flex; height: 6px; border-radius: 3px; overflow: hidden; background: var(--border); margin: 10px 0 6px; }
        .bar .critical { background: var(--red); }
        .bar .warning { background: var(--amber); }
        .bar .normal { background: var(--green); }

        .insights .insight { border-left: 4px solid var(--gray); margin-bottom: 10px; }
        .insight.critical { border-left-color: var(--red); }
        .insight.warning { border-left-color: var(--amber); }
        .insight.prediction { border-left-color: var(--purple); }
        .insight.optimization { border-left-color: var(--blue); }
        .insight.success { border-left-color: var(--green); }
        .insight h4 { font-size: 0.95rem; margin-bottom: 4px; }
        .insight p { font-size: 0.85rem; color: var(--text-dim); }
        .badges { display: flex; flex-wrap: wrap; gap: 6px; margin: 8px 0; }
        .badge { font-size: 0.72rem; padding: 2px 8px; border-radius: 999px; border: 1px solid var(--border); }
        .recommendation { font-size: 0.85rem; background: #eff6ff; border-radius: 6px; padding: 8px; margin-top: 8px; }
        .counts { display: grid; grid-template-columns: repeat(3, 1fr); gap: 10px; margin-top: 10px; text-align: center; }
        .counts strong { display: block; font-size: 1.3rem; }

        .metric-card .value { font-size: 1.6rem; font-weight: 600; }
        .metric-card .label { font-size: 0.85rem; color: var(--text-dim); text-transform: capitalize; }
        .metric-card.warning { border-color: var(--amber); }
        .metric-card.critical { border-color: var(--red); }
        .arrow-up { color: var(--red); }
        .arrow-down { color: var(--blue); }

        table.mini { width: 100%; border-collapse: collapse; font-size: 0.85rem; }
        table.mini th, table.mini td { padding: 6px 8px; border-bottom: 1px solid var(--border); text-align: left; }
        table.mini tr { cursor: pointer; }

        .empty { text-align: center; color: var(--text-dim); padding: 48px; }

        @media (max-width: 768px) {
            .sidebar { position: absolute; z-index: 10; height: 100vh; }
        }
"""
