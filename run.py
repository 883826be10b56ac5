from influencer_os import create_app

app = create_app()

if __name__ == '__main__':
    # Development; production runs `gunicorn run:app`
    app.run(debug=True, port=5000)
