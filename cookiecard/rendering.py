"""HTML pages for the dashboard and the public embed card."""
from __future__ import annotations

from html import escape

from cookiecard.models import Widget
from cookiecard.modules.aggregation.domain.models import AGGREGATION_KINDS

BOOTSTRAP_CSS = "https://cdn.jsdelivr.net/npm/bootstrap@5.3.0/dist/css/bootstrap.min.css"
BOOTSTRAP_JS = "https://cdn.jsdelivr.net/npm/bootstrap@5.3.0/dist/js/bootstrap.bundle.min.js"
FEATHER_JS = "https://unpkg.com/feather-icons"

CALCULATION_LABELS = {
    "sum": "Sum",
    "average": "Average",
    "count": "Count",
    "min": "Min",
    "max": "Max",
}


def _e(value: object) -> str:
    return escape("" if value is None else str(value), quote=True)


def _calculation_options(selected: str | None) -> str:
    return "".join(
        f'<option value="{kind}"{" selected" if kind == selected else ""}>{CALCULATION_LABELS[kind]}</option>'
        for kind in AGGREGATION_KINDS
    )


# Shared client script: fills the database select and the property datalist.
PICKER_SCRIPT = """
<script>
  async function loadDatabases() {
    const select = document.getElementById('dbSelect');
    const currentId = select.getAttribute('data-selected');
    try {
      const res = await fetch('/api/databases');
      const dbs = await res.json();
      select.innerHTML = '<option value="">-- Select Database --</option>';
      dbs.forEach(db => {
        const opt = document.createElement('option');
        opt.value = db.id;
        opt.innerText = db.icon + " " + db.title;
        if (db.id === currentId) opt.selected = true;
        select.appendChild(opt);
      });
      if (currentId) loadProperties(currentId, false);
    } catch (e) { select.innerHTML = '<option value="">Error loading</option>'; }
  }

  async function loadProperties(dbId, reset) {
    const list = document.getElementById('propList');
    const input = document.getElementById('propInput');
    list.innerHTML = '';
    if (reset !== false) input.value = '';
    if (!dbId) return;
    try {
      const res = await fetch('/api/properties?dbId=' + encodeURIComponent(dbId));
      const props = await res.json();
      props.forEach(p => {
        const opt = document.createElement('option');
        opt.value = p;
        list.appendChild(opt);
      });
    } catch (e) { console.log("Error fetching properties"); }
  }

  loadDatabases();
</script>
"""


def render_login_page() -> str:
    return f"""<!DOCTYPE html>
<html>
  <head>
    <title>Cookie Card Login</title>
    <link href="{BOOTSTRAP_CSS}" rel="stylesheet">
    <style>
      body {{ background-color: #F8F9FE; height: 100vh; display: flex; align-items: center; justify-content: center; }}
      .login-card {{ background: white; border-radius: 15px; box-shadow: 0 4px 20px rgba(0,0,0,0.05); padding: 40px; text-align: center; max-width: 400px; width: 100%; border-top: 5px solid #C69C6D; }}
      .btn-cookie {{ background-color: #4A3B32; color: #fff; border: none; padding: 10px 20px; border-radius: 5px; font-weight: 600; width: 100%; }}
      .btn-cookie:hover {{ background-color: #C69C6D; color: white; }}
      .logo-text {{ font-weight: 800; color: #4A3B32; font-size: 24px; margin-bottom: 5px; }}
      .sub-text {{ color: #8898aa; font-size: 14px; margin-bottom: 30px; }}
    </style>
  </head>
  <body>
    <div class="login-card">
      <div class="logo-text">🍪 Cookie Card</div>
      <div class="sub-text">Brought to you by Digital Cookie</div>
      <p style="color:#525f7f; margin-bottom:30px;">Turn your Notion databases into beautiful dashboard widgets.</p>
      <a href="/auth/notion" class="btn btn-cookie">Connect Notion Workspace</a>
    </div>
  </body>
</html>"""


def _widget_card(widget: Widget, base_url: str) -> str:
    source_label = "Live Data" if widget.db_id else "Manual"
    calculation = CALCULATION_LABELS.get(widget.calculation or "", widget.calculation or "Sum")
    return f"""
    <div class="col-md-4 mb-4">
      <div class="card widget-card h-100">
        <div class="card-body">
          <div class="row">
            <div class="col">
              <h5 class="card-title text-uppercase text-muted mb-0">{_e(widget.title)}</h5>
              <span class="h2 font-weight-bold mb-0 text-cookie-dark">{source_label}</span>
            </div>
            <div class="col-auto">
              <div class="icon icon-shape bg-cookie text-white rounded-circle shadow">
                <i data-feather="{_e(widget.icon)}"></i>
              </div>
            </div>
          </div>
          <p class="mt-3 mb-0 text-muted text-sm">
            <span class="text-success mr-2">{_e(calculation)}</span>
            <span class="text-nowrap">{_e(widget.subtext)}</span>
          </p>
          <div class="mt-3">
            <input type="text" value="{_e(base_url)}/embed/{_e(widget.id)}" class="form-control form-control-sm mb-2" readonly onclick="this.select()">
            <div class="d-flex justify-content-between">
              <a href="/edit/{_e(widget.id)}" class="btn btn-sm btn-outline-cookie">Edit</a>
              <form action="/delete" method="POST" class="d-inline">
                <input type="hidden" name="id" value="{_e(widget.id)}">
                <button type="submit" class="btn btn-sm btn-outline-danger">Delete</button>
              </form>
            </div>
          </div>
        </div>
      </div>
    </div>"""


def render_dashboard_page(widgets: list[Widget], base_url: str) -> str:
    cards = "".join(_widget_card(widget, base_url) for widget in widgets)
    empty = (
        '<div class="text-center text-muted mt-5"><p>No widgets yet. Click "New Widget" to start.</p></div>'
        if not widgets
        else ""
    )
    return f"""<!DOCTYPE html>
<html>
  <head>
    <title>Cookie Card Dashboard</title>
    <link href="{BOOTSTRAP_CSS}" rel="stylesheet">
    <script src="{FEATHER_JS}"></script>
    <style>
      :root {{ --cookie-primary: #C69C6D; --cookie-dark: #4A3B32; --bg-light: #F8F9FE; }}
      body {{ background-color: var(--bg-light); font-family: 'Open Sans', sans-serif; }}
      .sidebar {{ height: 100vh; position: fixed; top: 0; left: 0; width: 250px; background: white; box-shadow: 0 0 2rem 0 rgba(136, 152, 170, .15); padding-top: 20px; }}
      .sidebar .nav-link {{ color: #525f7f; font-weight: 600; padding: 1rem 1.5rem; display: flex; align-items: center; }}
      .sidebar .nav-link.active {{ color: var(--cookie-primary); background: rgba(198, 156, 109, 0.1); border-right: 4px solid var(--cookie-primary); }}
      .brand-text {{ font-size: 22px; font-weight: 800; color: var(--cookie-dark); padding: 0 1.5rem; margin-bottom: 2rem; }}
      .main-content {{ margin-left: 250px; padding: 30px; }}
      .widget-card {{ border: none; border-radius: 1rem; box-shadow: 0 0 2rem 0 rgba(136, 152, 170, .15); }}
      .icon-shape {{ width: 48px; height: 48px; display: flex; align-items: center; justify-content: center; border-radius: 50%; }}
      .bg-cookie {{ background-color: var(--cookie-primary) !important; }}
      .text-cookie-dark {{ color: var(--cookie-dark) !important; }}
      .btn-cookie {{ background-color: var(--cookie-dark); color: white; border: none; }}
      .btn-cookie:hover {{ background-color: var(--cookie-primary); color: white; }}
      .btn-outline-cookie {{ color: var(--cookie-dark); border-color: var(--cookie-dark); }}
      .create-card {{ background: white; border-radius: 1rem; padding: 25px; margin-bottom: 30px; }}
    </style>
  </head>
  <body>
    <div class="sidebar d-none d-md-block">
      <div class="brand-text">🍪 Cookie Card</div>
      <ul class="nav flex-column">
        <li class="nav-item"><a class="nav-link active" href="/"><i data-feather="grid"></i> Dashboard</a></li>
        <li class="nav-item"><a class="nav-link" href="/logout"><i data-feather="log-out"></i> Logout</a></li>
      </ul>
    </div>
    <div class="main-content">
      <div class="d-flex justify-content-between align-items-center mb-4">
        <h2 class="text-cookie-dark font-weight-bold">Dashboard</h2>
        <button class="btn btn-cookie" type="button" data-bs-toggle="collapse" data-bs-target="#createForm">
          <i data-feather="plus"></i> New Widget
        </button>
      </div>
      <div class="collapse mb-4" id="createForm">
        <div class="create-card shadow-sm">
          <h4 class="mb-4 text-cookie-dark">Create New Widget</h4>
          <form action="/add" method="POST">
            <div class="row g-3">
              <div class="col-md-3"><label class="form-label small fw-bold">Title</label>
                <input type="text" name="title" class="form-control" placeholder="Total Revenue" required></div>
              <div class="col-md-2"><label class="form-label small fw-bold">Icon (Feather)</label>
                <input type="text" name="icon" class="form-control" placeholder="dollar-sign" required></div>
              <div class="col-md-1"><label class="form-label small fw-bold">Prefix</label>
                <input type="text" name="prefix" class="form-control" placeholder="$"></div>
              <div class="col-md-6"><label class="form-label small fw-bold">Subtext</label>
                <input type="text" name="subtext" class="form-control" placeholder="vs last month" required></div>
              <div class="col-12"><hr class="text-muted"></div>
              <div class="col-md-4"><label class="form-label text-primary small fw-bold">Source Database</label>
                <select name="dbId" id="dbSelect" class="form-select" data-selected="" onchange="loadProperties(this.value)">
                  <option value="" selected>Loading...</option>
                </select></div>
              <div class="col-md-3"><label class="form-label text-primary small fw-bold">Target Property</label>
                <input type="text" name="property" id="propInput" class="form-control" placeholder="Type or Select..." list="propList">
                <datalist id="propList"></datalist></div>
              <div class="col-md-2"><label class="form-label text-primary small fw-bold">Calculation</label>
                <select name="calculation" class="form-select">{_calculation_options("sum")}</select></div>
              <div class="col-md-3"><label class="form-label text-success small fw-bold">Or Manual Value</label>
                <input type="text" name="manualValue" class="form-control" placeholder="0"></div>
            </div>
            <div class="mt-4 text-end">
              <button type="button" class="btn btn-light" data-bs-toggle="collapse" data-bs-target="#createForm">Cancel</button>
              <button type="submit" class="btn btn-cookie px-4">Create Widget</button>
            </div>
          </form>
        </div>
      </div>
      <div class="row">{cards}</div>
      {empty}
    </div>
    <script src="{BOOTSTRAP_JS}"></script>
    <script>feather.replace();</script>
    {PICKER_SCRIPT}
  </body>
</html>"""


def render_edit_page(widget: Widget) -> str:
    return f"""<!DOCTYPE html>
<html>
  <head>
    <title>Edit Widget</title>
    <link href="{BOOTSTRAP_CSS}" rel="stylesheet">
    <style>
      body {{ background: #F8F9FE; font-family: sans-serif; padding: 40px; }}
      .edit-card {{ background: white; border-radius: 1rem; max-width: 800px; margin: 0 auto; padding: 40px; box-shadow: 0 0 20px rgba(0,0,0,0.05); }}
      .btn-cookie {{ background-color: #4A3B32; color: white; }}
      .btn-cookie:hover {{ background-color: #C69C6D; color: white; }}
    </style>
  </head>
  <body>
    <div class="edit-card">
      <h3 class="mb-4 text-center" style="color:#4A3B32;">Edit Widget</h3>
      <form action="/update" method="POST">
        <input type="hidden" name="id" value="{_e(widget.id)}">
        <div class="row g-3">
          <div class="col-md-6"><label class="form-label fw-bold small">Title</label>
            <input type="text" name="title" class="form-control" value="{_e(widget.title)}" required></div>
          <div class="col-md-3"><label class="form-label fw-bold small">Icon</label>
            <input type="text" name="icon" class="form-control" value="{_e(widget.icon)}" required></div>
          <div class="col-md-3"><label class="form-label fw-bold small">Prefix</label>
            <input type="text" name="prefix" class="form-control" value="{_e(widget.prefix)}"></div>
          <div class="col-12"><label class="form-label fw-bold small">Subtext</label>
            <input type="text" name="subtext" class="form-control" value="{_e(widget.subtext)}" required></div>
          <div class="col-12"><hr></div>
          <div class="col-md-6"><label class="form-label text-primary fw-bold small">Database</label>
            <select name="dbId" id="dbSelect" class="form-select" data-selected="{_e(widget.db_id)}" onchange="loadProperties(this.value)">
              <option value="">Loading...</option>
            </select></div>
          <div class="col-md-6"><label class="form-label text-primary fw-bold small">Property</label>
            <input type="text" name="property" id="propInput" class="form-control" value="{_e(widget.property)}" list="propList">
            <datalist id="propList"></datalist></div>
          <div class="col-md-6"><label class="form-label text-primary fw-bold small">Calculation</label>
            <select name="calculation" class="form-select">{_calculation_options(widget.calculation)}</select></div>
          <div class="col-md-6"><label class="form-label text-success fw-bold small">Manual Value (Override)</label>
            <input type="text" name="manualValue" class="form-control" value="{_e(widget.manual_value)}"></div>
        </div>
        <div class="mt-4 d-flex justify-content-between">
          <a href="/" class="btn btn-outline-secondary">Cancel</a>
          <button type="submit" class="btn btn-cookie px-5">Save Changes</button>
        </div>
      </form>
    </div>
    {PICKER_SCRIPT}
  </body>
</html>"""


def render_embed_page(widget: Widget, display_value: str, refresh_seconds: int) -> str:
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <meta http-equiv="refresh" content="{int(refresh_seconds)}">
    <script src="{FEATHER_JS}"></script>
    <style>
      :root {{ --card-bg: #FFFFFF; --card-border: #E0E0E0; --text-title: #787774; --text-value: #37352F; --text-sub: #9B9A97; --icon-color: #9B9A97; }}
      @media (prefers-color-scheme: dark) {{ :root {{ --card-bg: #202020; --card-border: #333333; --text-title: #AFAFAF; --text-value: #FFFFFF; --text-sub: #808080; --icon-color: #808080; }} }}
      body {{ margin: 0; padding: 10px; overflow: hidden; background-color: transparent; font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, sans-serif; }}
      .card {{ background-color: var(--card-bg); border: 1px solid var(--card-border); border-radius: 8px; height: calc(100vh - 20px); padding: 20px; box-sizing: border-box; display: flex; flex-direction: column; justify-content: center; }}
      .header-row {{ display: flex; justify-content: space-between; align-items: flex-start; margin-bottom: 12px; }}
      .title {{ font-size: 13px; font-weight: 600; color: var(--text-title); text-transform: uppercase; letter-spacing: 0.5px; }}
      .value {{ font-size: 38px; font-weight: 700; color: var(--text-value); margin-bottom: 6px; letter-spacing: -0.5px; line-height: 1; }}
      .subtext {{ font-size: 13px; color: var(--text-sub); }}
      .icon-box {{ color: var(--icon-color); }}
    </style>
  </head>
  <body>
    <div class="card">
      <div class="header-row">
        <div class="title">{_e(widget.title)}</div>
        <div class="icon-box"><i data-feather="{_e(widget.icon)}" width="18" height="18"></i></div>
      </div>
      <div class="value">{_e(display_value)}</div>
      <div class="subtext">{_e(widget.subtext)}</div>
    </div>
    <script>feather.replace();</script>
  </body>
</html>"""
