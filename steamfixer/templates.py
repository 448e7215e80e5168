INDEX_HTML = r"""<!doctype html>
<html lang="en" data-bs-theme="dark">
<head>
  <meta charset="utf-8">
  <title>{{ app_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
  <style>
    .path { color: rgba(255,255,255,.6); }
    code.path { word-break: break-all; }
  </style>
</head>
<body>
<nav class="navbar navbar-expand-lg bg-body-tertiary px-3">
  <a class="navbar-brand" href="{{ url_for('steamfixer.index') }}">{{ app_title }}</a>
  <div class="ms-auto d-flex gap-2">
    <form method="post" action="{{ url_for('steamfixer.quickfix_page') }}">
      <button class="btn btn-outline-info btn-sm">Fix desktop shortcuts</button>
    </form>
    <form method="post" action="{{ url_for('steamfixer.cleanup_page') }}">
      <button class="btn btn-outline-warning btn-sm">Restore temp folders</button>
    </form>
    <a class="btn btn-outline-light btn-sm" href="{{ url_for('steamfixer.index') }}">Rescan</a>
  </div>
</nav>

<div class="container py-4">
  {% with messages = get_flashed_messages() %}
    {% if messages %}
      <div class="alert alert-warning">{{ messages|join(' ') }}</div>
    {% endif %}
  {% endwith %}

  <div class="mb-3 small">Library: <code class="path">{{ steamapps_path }}</code></div>

  {% if not games %}
    <div class="text-center py-5">
      <h4>No installed games found.</h4>
      <p class="text-secondary">Point the library path at a <code>steamapps</code> folder.</p>
    </div>
  {% else %}
  <table class="table table-sm align-middle">
    <thead><tr><th>Name</th><th>App ID</th><th>Folder</th><th>Status</th></tr></thead>
    <tbody>
    {% for g in games %}
      <tr>
        <td class="fw-semibold">{{ g.name }}</td>
        <td><code>{{ g.app_id }}</code></td>
        <td class="path small">{{ g.path }}</td>
        <td><span class="badge text-bg-secondary">{{ g.status.value }}</span></td>
      </tr>
    {% endfor %}
    </tbody>
  </table>
  {% endif %}
</div>
</body>
</html>
"""
