# run.py
import logging
from cos_drive import create_app
from cos_drive.config_security import SecurityConfig
from flask_cors import CORS

# Set up logging to see what's happening
logging.basicConfig(
    level=SecurityConfig.get_log_level(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = create_app()
CORS(app,
     resources={r"/cos/*": {"origins": SecurityConfig.get_allowed_origins()}},
     supports_credentials=True)

if __name__ == '__main__':
    app.run(debug=SecurityConfig.is_debug_mode(), port=8000)
