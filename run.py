from after8 import create_app

# Entry point for local development.
app = create_app()

if __name__ == '__main__':
    app.run(debug=True, port=app.config['PORT'])
