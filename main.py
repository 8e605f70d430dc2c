import os
from app import create_app

app = create_app(os.getenv('UNWIND_CONFIG', 'default'))

if __name__ == '__main__':
    app.run(host='127.0.0.1', port=int(os.getenv('PORT', '5000')), debug=app.config.get('DEBUG', False))
