from app import create_app
import os

app = create_app(os.getenv('APP_ENV', 'development'))

# Ensure the local storage directory exists
with app.app_context():
    if app.config['ENV'] != 'production':
        os.makedirs(app.config['RESUME_STORAGE_PATH'], exist_ok=True)

if __name__ == '__main__':
    app.run(debug=True)
