import os

from fieldreports import create_app
from fieldreports.extensions import db

app = create_app(os.environ.get('FIELD_REPORTS_ENV', 'default'))

with app.app_context():
    db.create_all()

if __name__ == '__main__':
    port = app.config['PORT']
    print("=" * 50)
    print(f"Field reports proxy running on http://localhost:{port}")
    print("=" * 50)
    # Print registered rules (skip the Flask static endpoint)
    seen = set()
    for rule in sorted(app.url_map.iter_rules(), key=lambda r: (str(r.rule), str(list(r.methods)))):
        if rule.endpoint == 'static':
            continue
        methods = ','.join(sorted(m for m in rule.methods if m not in ('HEAD', 'OPTIONS')))
        entry = f"  - {methods} {rule.rule}"
        if entry not in seen:
            print(entry)
            seen.add(entry)
    print("=" * 50)
    if not app.config.get('SHEETS_ENDPOINT_URL'):
        print('Warning: SHEETS_ENDPOINT_URL is not set; /api/sheets will answer 500.')
    try:
        app.run(debug=app.config['DEBUG'], port=port, host='0.0.0.0')
    except OSError as e:
        print('Failed to start server:', e)
        print('If you see a socket/permission error, pick a different port and set FIELD_REPORTS_PORT or free the port.')
